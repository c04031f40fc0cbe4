"""Print the effective configuration with per-field origins (redacted)."""

from content_enhancer.config import resolve_config_with_origin

if __name__ == "__main__":
    print(resolve_config_with_origin().audit())  # noqa: T201
