"""Runtime settings for tidymac."""

from pydantic import BaseModel, Field

KB = 1024
MB = 1024 * KB
GB = 1024 * MB

# Big-file threshold presets offered by the menu
BIG_FILE_PRESETS = [100 * MB, 500 * MB, 1 * GB, 5 * GB]

# Old-file age presets offered by the menu (days)
OLD_FILE_PRESETS = [30, 90, 180, 365]


class Settings(BaseModel):
    """Tunables for scans, deletion and the elevated session."""

    big_file_roots: list[str] = Field(
        default_factory=lambda: [
            "~/Documents",
            "~/Desktop",
            "~/Downloads",
            "~/Movies",
            "~/Music",
            "~/Pictures",
        ],
        description="Directories searched for large files",
    )
    duplicate_roots: list[str] = Field(
        default_factory=lambda: ["~/Documents", "~/Desktop", "~/Downloads"],
        description="Directories searched for duplicate files",
    )
    old_file_roots: list[str] = Field(
        default_factory=lambda: ["~/Documents", "~/Desktop", "~/Downloads"],
        description="Directories searched for old files",
    )
    skip_names: frozenset[str] = Field(
        default=frozenset({".git", "node_modules", "vendor", "Library"}),
        description="Directory names pruned from big-file and duplicate scans",
    )
    old_file_skip_names: frozenset[str] = Field(
        default=frozenset({".git", "node_modules"}),
        description="Directory names pruned from the old-file scan",
    )

    duplicate_min_size: int = Field(1 * MB, description="Files must be strictly larger than this")
    hash_prefix_bytes: int = Field(4096, description="Bytes hashed per file for the fingerprint")
    walk_progress_every: int = Field(500, description="Progress interval while walking, in files")
    hash_progress_every: int = Field(10, description="Progress interval while hashing, in files")

    settle_delay: float = Field(0.1, description="Seconds to wait after deletion before re-measuring")

    sudo_timeout: float = Field(5 * 60, description="Seconds a sudo grant is trusted")
    sudo_keepalive_interval: float = Field(2 * 60, description="Seconds between sudo refreshes")


DEFAULT_SETTINGS = Settings()
