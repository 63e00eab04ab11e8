import os
from dataclasses import dataclass
from pathlib import Path


def _load_dotenv_if_available() -> None:
    """Best-effort .env loading."""
    from dotenv import load_dotenv

    # Prefer the .env next to this package (works no matter the cwd)
    env_path = Path(__file__).resolve().parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    # Also try default resolution (cwd-based) as a fallback
    load_dotenv(override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    # Storage backend
    storage_backend: str = "s3"  # Options: "s3" | "local"
    storage_base_path: str = "/shared/bucket"  # Only used when storage_backend="local"

    # S3 configuration
    s3_region: str = ""
    s3_bucket: str = ""
    s3_access_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_session_token: str | None = None
    s3_prefix: str = ""
    s3_endpoint_url: str | None = None
    s3_force_path_style: bool = False
    s3_connect_timeout: float = 10.0
    s3_read_timeout: float = 60.0
    s3_max_attempts: int = 3

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file_path: str | None = None

    def validate(self) -> None:
        if self.storage_backend not in {"s3", "local"}:
            raise ValueError("STORAGE_BACKEND must be 's3' or 'local'")

        if not self.s3_region:
            raise ValueError("S3_REGION is required")
        if not self.s3_bucket:
            raise ValueError("S3_BUCKET is required")

        if bool(self.s3_access_key_id) != bool(self.s3_secret_access_key):
            raise ValueError("S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY must be set together")

        if self.s3_connect_timeout <= 0:
            raise ValueError("S3_CONNECT_TIMEOUT must be > 0")
        if self.s3_read_timeout <= 0:
            raise ValueError("S3_READ_TIMEOUT must be > 0")
        if self.s3_max_attempts < 1 or self.s3_max_attempts > 10:
            raise ValueError("S3_MAX_ATTEMPTS must be between 1 and 10")

        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR, or CRITICAL")

        if self.log_format not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")

        if self.storage_backend == "local":
            base_path = Path(self.storage_base_path)
            if not base_path.exists():
                raise ValueError(f"STORAGE_BASE_PATH does not exist: {self.storage_base_path}")
            if not os.access(base_path, os.W_OK):
                raise ValueError(f"STORAGE_BASE_PATH is not writable: {self.storage_base_path}")

    def to_options(self):
        """Build the immutable adapter options from this config."""
        from bucketfs.filesystem.s3 import S3FileSystemOptions

        return S3FileSystemOptions(
            region=self.s3_region,
            bucket=self.s3_bucket,
            access_key_id=self.s3_access_key_id,
            secret_access_key=self.s3_secret_access_key,
            session_token=self.s3_session_token,
            prefix=self.s3_prefix,
            endpoint_url=self.s3_endpoint_url,
            force_path_style=self.s3_force_path_style,
            connect_timeout=self.s3_connect_timeout,
            read_timeout=self.s3_read_timeout,
            max_attempts=self.s3_max_attempts,
        )

    def create_backend(self):
        """
        Create object backend based on configuration.

        Returns:
            ObjectBackend instance (S3Backend or LocalObjectBackend)
        """
        from bucketfs.storage import LocalObjectBackend, S3Backend

        if self.storage_backend == "local":
            return LocalObjectBackend(base_path=self.storage_base_path)
        elif self.storage_backend == "s3":
            return S3Backend(
                bucket_name=self.s3_bucket,
                region=self.s3_region,
                access_key_id=self.s3_access_key_id,
                secret_access_key=self.s3_secret_access_key,
                session_token=self.s3_session_token,
                endpoint_url=self.s3_endpoint_url,
                force_path_style=self.s3_force_path_style,
                connect_timeout=self.s3_connect_timeout,
                read_timeout=self.s3_read_timeout,
                max_attempts=self.s3_max_attempts,
            )
        else:
            raise ValueError(f"Unknown storage backend: {self.storage_backend}")

    def create_filesystem(self):
        """Create an S3FileSystem wired to the configured backend and logger."""
        from bucketfs.core.logging import setup_logger
        from bucketfs.filesystem.s3 import S3FileSystem

        return S3FileSystem(
            self.to_options(),
            backend=self.create_backend(),
            logger=setup_logger("bucketfs", self),
        )


def load_config() -> Config:
    _load_dotenv_if_available()

    config = Config(
        storage_backend=os.environ.get("STORAGE_BACKEND", "s3"),
        storage_base_path=os.environ.get("STORAGE_BASE_PATH", "/shared/bucket"),
        s3_region=os.environ.get("S3_REGION", os.environ.get("AWS_REGION", "")).strip(),
        s3_bucket=os.environ.get("S3_BUCKET", "").strip(),
        s3_access_key_id=os.environ.get("S3_ACCESS_KEY_ID") or None,
        s3_secret_access_key=os.environ.get("S3_SECRET_ACCESS_KEY") or None,
        s3_session_token=os.environ.get("S3_SESSION_TOKEN") or None,
        s3_prefix=os.environ.get("S3_PREFIX", ""),
        s3_endpoint_url=os.environ.get("S3_ENDPOINT_URL") or None,
        s3_force_path_style=_env_flag("S3_FORCE_PATH_STYLE"),
        s3_connect_timeout=float(os.environ.get("S3_CONNECT_TIMEOUT", "10.0")),
        s3_read_timeout=float(os.environ.get("S3_READ_TIMEOUT", "60.0")),
        s3_max_attempts=int(os.environ.get("S3_MAX_ATTEMPTS", "3")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
        log_file_path=os.environ.get("LOG_FILE_PATH") or None,
    )

    config.validate()
    return config
