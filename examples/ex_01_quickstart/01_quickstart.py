"""Quickstart: register factories and resolve a dependency chain.

Factories receive a resolver and pull their own dependencies through it. Nothing
is cached: share an instance by registering a value or by capturing it in a
closure.
"""

from __future__ import annotations

from scopewire import Registry, Resolver


class Database:
    def __init__(self, host: str) -> None:
        self.host = host


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def make_repository(resolver: Resolver) -> UserRepository:
    return UserRepository(resolver.resolve(Database))


def main() -> None:
    registry = Registry()
    registry.register_value(str, "localhost", name="db_host")
    registry.register(Database, lambda r: Database(r.resolve(str, name="db_host")))
    registry.register(UserRepository, make_repository)
    registry.register(UserService, lambda r: UserService(r.resolve(UserRepository)))

    service = registry.resolve(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    fresh = registry.resolve(UserService) is not service
    print(f"fresh_instance={fresh}")  # => fresh_instance=True

    print(registry.describe_registrations().splitlines()[1].strip())  # => Database


if __name__ == "__main__":
    main()
