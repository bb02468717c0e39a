#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from battle_app.config.loader import ConfigLoader
from battle_app.config.validation import ConfigValidator, ValidationError
from battle_app.decisions.policies import POLICIES


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating battle configuration in {loader.config_dir}...")

    config = loader.merge_config()
    errors = ConfigValidator.validate_config(config)

    policy = (config.get("ai") or {}).get("policy")
    if policy not in POLICIES:
        errors.append(ValidationError(
            field="ai.policy",
            message=f"Unknown policy, expected one of {', '.join(sorted(POLICIES))}",
            value=policy
        ))

    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    battle = loader.load_battle_config()
    print("✅ Configuration is valid")
    print(f"   {battle.max_rounds} rounds of {battle.round_duration_seconds}s, "
          f"{battle.transition_seconds}s transition, starting cash {battle.starting_cash}")
    print(f"   {len(battle.instrument_catalog)} instruments, AI policy '{battle.ai.policy}'")


if __name__ == "__main__":
    main()
