"""Cleanup target catalog for tidymac."""

from tidymac.models import CleanupTarget

CATEGORY_ORDER = [
    "Cache",
    "Logs",
    "Temp",
    "Trash",
    "Dev",
    "Package Manager",
    "Apps",
    "System",
    "Backups",
    "User",
]


def _target(id: str, name: str, path: str, description: str, category: str, **kwargs) -> CleanupTarget:
    return CleanupTarget(
        id=id, name=name, path=path, description=description, category=category, **kwargs
    )


DEFAULT_TARGETS: list[CleanupTarget] = [
    # =============================================================================
    # CACHE FILES
    # =============================================================================
    _target("user_caches", "User Caches", "~/Library/Caches/*", "Application caches", "Cache"),
    _target(
        "system_caches", "System Caches", "/Library/Caches/*", "System-wide caches", "Cache",
        requires_sudo=True,
    ),
    _target(
        "safari_cache", "Safari Cache", "~/Library/Caches/com.apple.Safari/*",
        "Safari browser cache", "Cache",
    ),
    _target(
        "chrome_cache", "Chrome Cache", "~/Library/Caches/Google/Chrome/*/Cache/*",
        "Chrome browser cache", "Cache",
    ),
    _target(
        "firefox_cache", "Firefox Cache", "~/Library/Caches/Firefox/Profiles/*/cache2/*",
        "Firefox browser cache", "Cache",
    ),
    _target(
        "quicklook_cache", "Quick Look Cache",
        "/private/var/folders/*/*/C/com.apple.QuickLook.thumbnailcache/*",
        "Quick Look thumbnails", "Cache",
    ),
    _target("icloud_cache", "iCloud Cache", "~/Library/Caches/CloudKit/*", "iCloud sync cache", "Cache"),
    _target(
        "photos_cache", "Photos Cache",
        "~/Library/Containers/com.apple.Photos/Data/Library/Caches/*",
        "Photos app cache", "Cache",
    ),
    _target(
        "appstore_cache", "App Store Cache", "~/Library/Caches/com.apple.appstore/*",
        "App Store cache", "Cache",
    ),
    # =============================================================================
    # LOG FILES
    # =============================================================================
    _target("user_logs", "User Logs", "~/Library/Logs/*", "Application logs", "Logs"),
    _target("system_logs", "System Logs", "/var/log/*", "System log files", "Logs", requires_sudo=True),
    _target(
        "crash_reports", "Crash Reports", "~/Library/Application Support/CrashReporter/*",
        "App crash logs", "Logs",
    ),
    _target(
        "diagnostic_logs", "Diagnostic Logs", "/private/var/db/diagnostics/*",
        "System diagnostics", "Logs", requires_sudo=True,
    ),
    # =============================================================================
    # TEMP FILES
    # =============================================================================
    _target(
        "user_temp", "User Temp", "/private/var/tmp/*", "User temporary files", "Temp",
        requires_sudo=True,
    ),
    _target(
        "system_temp", "System Temp", "/private/tmp/*", "System temporary files", "Temp",
        requires_sudo=True,
    ),
    _target("var_folders", "Var Folders", "/var/folders/*/*/T/*", "System temp folders", "Temp"),
    # =============================================================================
    # TRASH
    # =============================================================================
    _target("trash", "Trash", "~/.Trash/*", "Files in Trash", "Trash"),
    # =============================================================================
    # XCODE / DEVELOPMENT
    # =============================================================================
    _target(
        "xcode_derived_data", "Xcode Derived Data", "~/Library/Developer/Xcode/DerivedData/*",
        "Xcode build artifacts", "Dev",
    ),
    _target(
        "xcode_archives", "Xcode Archives", "~/Library/Developer/Xcode/Archives/*",
        "Xcode archives", "Dev",
    ),
    _target(
        "xcode_device_support", "Xcode Device Support",
        "~/Library/Developer/Xcode/iOS DeviceSupport/*",
        "iOS debugging symbols", "Dev",
    ),
    _target(
        "ios_simulator", "iOS Simulator", "~/Library/Developer/CoreSimulator/*",
        "iOS Simulator files", "Dev",
    ),
    _target(
        "android_build_cache", "Android Build Cache", "~/.android/build-cache",
        "Android build cache", "Dev",
    ),
    _target("gradle_cache", "Gradle Cache", "~/.gradle/caches", "Gradle build cache", "Dev"),
    # =============================================================================
    # PACKAGE MANAGERS
    # =============================================================================
    _target(
        "homebrew_cache", "Homebrew Cache", "~/Library/Caches/Homebrew",
        "Homebrew download cache", "Package Manager",
        is_command=True, command="brew cleanup",
    ),
    _target("npm_cache", "npm Cache", "~/.npm/*", "npm packages cache", "Package Manager"),
    _target("yarn_cache", "yarn Cache", "~/Library/Caches/yarn/*", "yarn packages cache", "Package Manager"),
    _target("cargo_cache", "Cargo Cache", "~/.cargo/registry/cache/*", "Rust crates cache", "Package Manager"),
    _target("cargo_git", "Cargo Git", "~/.cargo/git/checkouts/*", "Cargo git checkouts", "Package Manager"),
    _target("pip_cache", "pip Cache", "~/Library/Caches/pip/*", "Python pip cache", "Package Manager"),
    _target(
        "composer_cache", "Composer Cache", "~/Library/Caches/composer/*",
        "PHP Composer cache", "Package Manager",
    ),
    _target("gem_cache", "gem Cache", "~/.gem/cache/*", "Ruby gems cache", "Package Manager"),
    _target(
        "cocoapods_cache", "CocoaPods Cache", "~/Library/Caches/CocoaPods/*",
        "CocoaPods cache", "Package Manager",
    ),
    # =============================================================================
    # APP CACHES
    # =============================================================================
    _target(
        "spotify_cache", "Spotify Cache", "~/Library/Caches/com.spotify.client/*",
        "Spotify offline cache", "Apps",
    ),
    _target(
        "slack_cache", "Slack Cache",
        "~/Library/Containers/com.tinyspeck.slackmacgap/Data/Library/Application Support/Slack/Cache/*",
        "Slack cache", "Apps",
    ),
    _target(
        "discord_cache", "Discord Cache", "~/Library/Application Support/discord/Cache/*",
        "Discord cache", "Apps",
    ),
    _target(
        "teams_cache", "Teams Cache", "~/Library/Application Support/Microsoft/Teams/*",
        "Microsoft Teams cache", "Apps",
    ),
    _target("zoom_cache", "Zoom Cache", "~/Library/Caches/us.zoom.xos/*", "Zoom cache", "Apps"),
    _target(
        "vscode_cache", "VS Code Cache", "~/Library/Application Support/Code/Cache/*",
        "VS Code cache", "Apps",
    ),
    # =============================================================================
    # SYSTEM / HIDDEN
    # =============================================================================
    _target(
        "saved_app_state", "Saved App State", "~/Library/Saved Application State/*",
        "App state data", "System",
    ),
    _target(
        "mail_downloads", "Mail Downloads",
        "~/Library/Containers/com.apple.mail/Data/Library/Mail Downloads/*",
        "Mail attachments", "System",
    ),
    _target(
        "message_attachments", "Message Attachments", "~/Library/Messages/Attachments/*",
        "iMessage photos/videos", "System",
    ),
    _target(
        "quicktime_cache", "QuickTime Cache", "~/Library/Caches/com.apple.QuickTime*",
        "QuickTime cache", "System",
    ),
    # =============================================================================
    # BACKUPS
    # =============================================================================
    _target(
        "ios_backups", "iOS Backups", "~/Library/Application Support/MobileSync/Backup/*",
        "iPhone/iPad backups", "Backups",
    ),
    _target(
        "time_machine_local", "Time Machine Local", "", "Time Machine local snapshots", "Backups",
        requires_sudo=True, is_command=True, command="tmutil deletelocalsnapshots /",
    ),
    # =============================================================================
    # DOWNLOADS (optional)
    # =============================================================================
    _target("downloads", "Downloads", "~/Downloads/*", "Downloads folder", "User"),
]


def get_default_targets() -> list[CleanupTarget]:
    """Get a fresh copy of the catalog with no size or selection state."""
    return [t.model_copy() for t in DEFAULT_TARGETS]


def get_target(targets: list[CleanupTarget], target_id: str) -> CleanupTarget | None:
    """Get a target by ID."""
    for target in targets:
        if target.id == target_id:
            return target
    return None


def group_by_category(targets: list[CleanupTarget]) -> dict[str, list[CleanupTarget]]:
    """Group targets by category, in catalog display order."""
    grouped: dict[str, list[CleanupTarget]] = {}
    order = {name: i for i, name in enumerate(CATEGORY_ORDER)}
    for target in sorted(targets, key=lambda t: order.get(t.category, len(order))):
        grouped.setdefault(target.category, []).append(target)
    return grouped


def has_selection(targets: list[CleanupTarget]) -> bool:
    """Check if any target is selected."""
    return any(t.selected for t in targets)
