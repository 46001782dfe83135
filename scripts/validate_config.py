#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sigbot_app.config.loader import ConfigLoader
from sigbot_app.config.validation import ConfigValidator
from sigbot_app.errors import ConfigurationError
from sigbot_app.sources import HttpSignalSource


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate sigbot settings.yaml")
    parser.add_argument("--config-dir", type=Path, default=None)
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating {loader.config_dir / 'settings.yaml'}...")

    try:
        merged = loader.merge_config()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(merged)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value!r})")
        sys.exit(1)

    config = loader.build_config(merged)

    try:
        sources = [HttpSignalSource(params) for params in config.sources]
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"✅ Window {config.schedule.start_hour:02d}:00 - "
          f"{config.schedule.end_hour:02d}:{config.schedule.end_minute:02d} ({config.schedule.timezone})")
    print(f"✅ {len(config.symbols)} symbols, every {config.schedule.interval_seconds:g}s")
    for source in sources:
        print(f"✅ Source {source.name} -> {source.params.url}")

    print("\n🎉 Configuration is valid!")
    sys.exit(0)


if __name__ == "__main__":
    main()
