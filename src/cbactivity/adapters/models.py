"""Data models shared by bucket connectors."""

from __future__ import annotations

from dataclasses import dataclass, field

from cbactivity.errors import ClusterConnectionError

SCHEMES = ("couchbase", "couchbases")


@dataclass(frozen=True, slots=True)
class BucketTarget:
    """Where to connect and which bucket to open.

    Hashable so it can key a connection pool. Passwords are left out of
    ``repr`` to keep them out of logs.

    Attributes:
        server: Cluster address, with or without a ``couchbase://`` scheme.
        username: RBAC user name (empty when bucket credentials are used).
        password: RBAC password.
        bucket: Bucket name.
        bucket_password: Legacy bucket-level password.
    """

    server: str
    username: str
    password: str = field(default="", repr=False)
    bucket: str = "default"
    bucket_password: str = field(default="", repr=False)

    def credentials(self) -> tuple[str, str]:
        """Resolve the (user, password) pair used to authenticate.

        RBAC credentials win when a user name is given. Otherwise the bucket
        name doubles as the user name with the bucket password, which is how
        bucket-level credentials map onto role-based clusters.
        """
        if self.username:
            return self.username, self.password
        return self.bucket, self.bucket_password

    def connection_string(self, enable_tls: bool = False) -> str:
        """Build a client connection string from ``server``.

        Addresses without a scheme get ``couchbase://`` (``couchbases://``
        with TLS). Any other scheme is rejected before a client sees it.

        Raises:
            ClusterConnectionError: If the address is blank or the scheme
                is not a Couchbase one.
        """
        server = self.server.strip()
        if "://" not in server:
            if not server:
                raise ClusterConnectionError("Connection error: empty server address")
            scheme = "couchbases" if enable_tls else "couchbase"
            return f"{scheme}://{server}"

        scheme, _, hosts = server.partition("://")
        if scheme.lower() not in SCHEMES:
            raise ClusterConnectionError(
                f"Connection error: unsupported scheme '{scheme}' in {server}"
            )
        if not hosts.strip(" ,/"):
            raise ClusterConnectionError(f"Connection error: no hosts in {server}")
        return server

    def hosts(self) -> list[str]:
        """Seed hosts named by ``server``, without scheme or query string."""
        _, _, rest = self.connection_string().partition("://")
        rest = rest.split("?", 1)[0].split("/", 1)[0]
        return [h.strip() for h in rest.split(",") if h.strip()]
