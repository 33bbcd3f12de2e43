"""
depbump presets - List, show and delete saved presets.
"""

from depbump.lib.config import ConfigStore


def cmd_presets_list(args, store: ConfigStore) -> int:
    presets = store.load_presets()
    if not presets:
        print("No presets saved. Presets are offered at the end of 'depbump run'.")
        return 0

    for name in sorted(presets):
        preset = presets[name]
        packages = ", ".join(str(p) for p in preset.packages)
        print(f"{name}")
        print(f"  packages: {packages}")
        print(f"  branches: {len(preset.branches)}")
    return 0


def cmd_presets_show(args, store: ConfigStore) -> int:
    presets = store.load_presets()
    preset = presets.get(args.name)
    if preset is None:
        print(f"ERROR: Preset '{args.name}' not found")
        return 1

    print(f"Preset: {args.name}")
    print("Packages:")
    for spec in preset.packages:
        print(f"  {spec}")
    print("Branches:")
    for branch in preset.branches:
        print(f"  {branch}")
    return 0


def cmd_presets_delete(args, store: ConfigStore) -> int:
    if not store.delete_preset(args.name):
        print(f"ERROR: Preset '{args.name}' not found")
        return 1
    print(f"Preset '{args.name}' deleted")
    return 0
