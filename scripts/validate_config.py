#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Any, Optional

from twfeed.config.loader import CONFIG_FILE_NAME, ConfigLoader
from twfeed.config.validation import ConfigValidator, ValidationError
from twfeed.errors import ConfigurationError


def validate_streamer_config(config_dir: Optional[Path] = None,
                             overrides: Optional[dict[str, Any]] = None) -> list[ValidationError]:
    """Validate the merged streamer configuration."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating {loader.config_dir / CONFIG_FILE_NAME}...")

    all_valid = True

    try:
        errors = validate_streamer_config(config_dir)
    except ConfigurationError as e:
        print(f"❌ Could not read configuration: {e}")
        sys.exit(1)

    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        all_valid = False
    else:
        print("✅ Streamer configuration is valid")

    # Overrides applied on top of the file, as clients pass them
    print("\n📋 Testing runtime overrides...")
    test_overrides = {
        "subscription": {
            "max_batch_size": 100,
            "pacing": "none",
        }
    }

    errors = validate_streamer_config(config_dir, test_overrides)
    if errors:
        print("❌ Override validation failed:")
        for error in errors:
            print(f"  • {error.field}: {error.message}")
        all_valid = False
    else:
        print("✅ Override validation passed")

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
