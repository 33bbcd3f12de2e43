"""
depbump run - Pick packages and branches, then update every target.
"""

import logging
from pathlib import Path

from depbump.api.directory import Branch, list_branches
from depbump.commands.common import build_client, ensure_credentials
from depbump.lib.config import AppConfig, ConfigStore
from depbump.lib.constants import EXAMPLE_PACKAGE_NAME, EXAMPLE_PACKAGE_VERSION
from depbump.lib.errors import ConfigurationMissing, ValidationError
from depbump.lib.prompts import (
    prompt_bool,
    prompt_choice,
    prompt_multiselect,
    prompt_required,
    prompt_validated,
)
from depbump.lib.types import PackageSpec, Preset
from depbump.lib.validate import parse_package_spec, validate_package_name, validate_package_version
from depbump.project.driver import LocalProjectDriver
from depbump.reporter import TerminalReporter
from depbump.workflow.engine import BatchResult, UpdateOrchestrator
from depbump.workflow.status import StatusBoard

logger = logging.getLogger(__name__)


def ensure_root(store: ConfigStore, config: AppConfig) -> tuple[AppConfig, Path]:
    """Return the project root, prompting until an existing directory is given.

    Raises:
        ConfigurationMissing: If the operator gives no answer
    """
    while True:
        if config.root:
            root = Path(config.root)
            if root.is_dir():
                return config, root
            print(f"Project root {root} does not exist, please set it again")

        value = prompt_required("Absolute path of the project root directory")
        if value is None:
            raise ConfigurationMissing("No project root directory given")
        config = store.save_root(str(Path(value).expanduser().resolve()))


def input_packages(initial: list[PackageSpec] | None = None) -> list[PackageSpec] | None:
    """Prompt for package name/version pairs. Returns None if cancelled."""
    packages = list(initial or [])
    while True:
        name = prompt_validated("Package name", validate_package_name, default=EXAMPLE_PACKAGE_NAME)
        if name is None:
            return None
        version = prompt_validated(
            f"Version of {name}", validate_package_version, default=EXAMPLE_PACKAGE_VERSION
        )
        if version is None:
            return None

        packages.append(PackageSpec(name=name, version=version))
        print("\nPackages so far:")
        for spec in packages:
            print(f"  {spec}")
        print()

        if not prompt_bool("Add another package?", default=False):
            return packages


def choose_preset(store: ConfigStore) -> Preset | None:
    """Offer to use or delete a saved preset.

    Returns the preset to use, or None to build a new selection.
    """
    while True:
        presets = store.load_presets()
        if not presets:
            return None

        action = prompt_choice("What do you want to do?", [
            ("use", "Use a preset"),
            ("delete", "Delete a preset"),
            ("new", "Create a new selection"),
        ])
        if action == "new":
            return None

        names = sorted(presets)
        name = prompt_choice(
            "Choose a preset",
            [(n, f"{n} ({len(presets[n].packages)} packages, {len(presets[n].branches)} branches)") for n in names],
        )
        if action == "use":
            return presets[name]

        store.delete_preset(name)
        print(f"Preset '{name}' deleted")


def select_branches(store: ConfigStore, config: AppConfig) -> tuple[list[str], list[Branch]] | None:
    """Fetch selectable branches and let the operator pick some."""
    with build_client(store, config) as client:
        branches = list_branches(client, config.endpoints)

    if not branches:
        print(f"No '{config.endpoints.engine_type}' branches found")
        return None

    choices = [
        (b.branch_name, f"{b.branch_name}  ({b.creator} - {b.work_item_title})")
        for b in branches
    ]
    selected = prompt_multiselect("Select branches to update", choices, minimum=1)
    if selected is None:
        return None
    return selected, branches


def offer_save_preset(store: ConfigStore, preset: Preset) -> None:
    if not prompt_bool("Save this selection as a preset?", default=False):
        return
    while True:
        name = prompt_required("Preset name")
        if name is None:
            return
        try:
            store.save_preset(name, preset)
        except ValidationError as e:
            print(f"  {e}")
            continue
        print(f"Preset '{name}' saved")
        return


def confirm_switch(project: str, current: str, target: str) -> bool:
    return prompt_bool(f"{project} is on '{current}'. Switch to '{target}'?", default=False)


def execute(config: AppConfig, root: Path, preset: Preset) -> BatchResult:
    """Run the batch update and print the summary."""
    driver = LocalProjectDriver(root, config.settings, confirm_switch=confirm_switch)
    board = StatusBoard(config.settings.history_limit, listener=TerminalReporter())
    orchestrator = UpdateOrchestrator(driver, preset.packages, board)

    print(f"\nUpdating {', '.join(str(p) for p in preset.packages)}")
    result = orchestrator.run(preset.branches)

    print(f"\nDone: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
    if result.all_succeeded:
        print("All projects updated")
        return result
    for name in result.failed:
        print(f"  FAILED {name}: {board[name].current_step}")
    return result


def cmd_run(args, store: ConfigStore) -> int:
    """Interactive update flow. Individual project failures still exit 0."""
    config = store.load()
    if getattr(args, "branch_policy", None):
        config.settings.branch_policy = args.branch_policy

    config, root = ensure_root(store, config)
    print(f"Project root: {root}")

    cli_packages = [parse_package_spec(text) for text in (getattr(args, "packages", None) or [])]
    preset_name = getattr(args, "preset", None)
    if preset_name:
        presets = store.load_presets()
        if preset_name not in presets:
            raise ValidationError(f"No preset named '{preset_name}'")
        preset = presets[preset_name]
    else:
        config = ensure_credentials(store, config)
        preset = None if cli_packages else choose_preset(store)

    if preset is None:
        packages = cli_packages or input_packages()
        if packages is None:
            print("Operation cancelled")
            return 0

        selection = select_branches(store, config)
        if selection is None:
            print("Operation cancelled")
            return 0
        selected, branches = selection

        preset = Preset(
            packages=packages,
            branches=selected,
            origin_branches=[b.to_dict() for b in branches],
        )
        offer_save_preset(store, preset)

    execute(config, root, preset)
    return 0
