"""Launch a PostgreSQL Docker container with one database per sample service."""

from __future__ import annotations

import argparse
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
EXAMPLES = ROOT / "examples"
for path in (ROOT, EXAMPLES):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from servicedb.registry import ServiceRegistry

DEFAULT_CONTAINER = "servicedb-sample-db"
DEFAULT_PORT = 5544
DEFAULT_PASSWORD = "servicedb"
DEFAULT_USER = "servicedb"
DEFAULT_PACKAGE = "servicedb_resources"
DOCKER_IMAGE = "postgres:16-alpine"


def run(cmd: list[str], *, check: bool = True, **kwargs) -> subprocess.CompletedProcess[str]:
    print("$", " ".join(cmd))
    return subprocess.run(cmd, check=check, text=True, **kwargs)


def container_exists(name: str) -> bool:
    result = subprocess.run(
        ["docker", "ps", "-a", "--filter", f"name={name}", "--format", "{{.ID}}"],
        text=True,
        capture_output=True,
    )
    return bool(result.stdout.strip())


def start_container(name: str, port: int, password: str, user: str) -> None:
    if container_exists(name):
        print(f"Container '{name}' already exists. Reusing it.")
        run(["docker", "start", name], check=False)
    else:
        run(
            [
                "docker",
                "run",
                "-d",
                "--name",
                name,
                "-e",
                f"POSTGRES_PASSWORD={password}",
                "-e",
                f"POSTGRES_USER={user}",
                "-p",
                f"{port}:5432",
                DOCKER_IMAGE,
            ]
        )
    wait_for_start(name, user)


def wait_for_start(name: str, user: str, retries: int = 15, delay: float = 1.0) -> None:
    for _ in range(retries):
        result = subprocess.run(["docker", "exec", name, "pg_isready", "-U", user], text=True)
        if result.returncode == 0:
            return
        time.sleep(delay)
    print("Warning: database did not report ready state; continuing anyway.")


def create_databases(name: str, user: str, services: tuple[str, ...]) -> None:
    for service in services:
        # CREATE DATABASE cannot run inside a transaction block, so one psql call per database.
        run(
            ["docker", "exec", "-i", name, "psql", "-U", user, "-d", "postgres", "-c", f'CREATE DATABASE "{service}"'],
            check=False,
        )


def print_exports(registry: ServiceRegistry, port: int, user: str, password: str) -> None:
    print("\n# Export these before running `python -m servicedb clean`:")
    for entry in registry:
        print(f"export {entry.url_variable}=postgresql://localhost:{port}/{entry.name}")
        print(f"export {entry.user_variable}={user}")
        print(f"export {entry.password_variable}={password}")
    print(f"export PYTHONPATH={EXAMPLES}")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--container", default=DEFAULT_CONTAINER, help="Docker container name")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Host port to expose Postgres on")
    parser.add_argument("--password", default=DEFAULT_PASSWORD, help="Postgres password")
    parser.add_argument("--user", default=DEFAULT_USER, help="Database user")
    parser.add_argument("--package", default=DEFAULT_PACKAGE, help="Resource package with services.xml")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    registry = ServiceRegistry.load_resource(package=args.package)
    try:
        start_container(args.container, args.port, args.password, args.user)
        create_databases(args.container, args.user, registry.names())
    except FileNotFoundError:
        print("Docker is not installed or not on PATH.")
        return 1
    print_exports(registry, args.port, args.user, args.password)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
