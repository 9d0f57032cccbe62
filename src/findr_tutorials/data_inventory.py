"""
Data inventory for the tutorial datasets.

Verifies existence of:
- Raw downloads in exp_raw/<dataset>/
- Processed Arrow tables in exp_pro/<dataset>/
"""

from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from findr_tutorials.cli_utils import error, info, success, warning
from findr_tutorials.config import resolve_data_dir
from findr_tutorials.constants import DATASETS, PROCESS_COMMANDS, processed_path, raw_path


@dataclass
class DatasetStatus:
    """Status of a single tutorial dataset."""

    name: str
    raw_files: dict[str, Path] = field(default_factory=dict)
    processed_files: dict[str, Path] = field(default_factory=dict)

    @property
    def raw_found(self) -> int:
        return sum(p.is_file() for p in self.raw_files.values())

    @property
    def processed_found(self) -> int:
        return sum(p.is_file() for p in self.processed_files.values())

    @property
    def complete(self) -> bool:
        """Check if every processed table exists."""
        return self.processed_found == len(self.processed_files)

    @property
    def processable(self) -> bool:
        """Check if every raw input exists."""
        return self.raw_found == len(self.raw_files)

    @property
    def status(self) -> str:
        """Return status indicator."""
        if self.complete:
            return "OK"
        if self.processed_found or self.raw_found:
            return "PARTIAL"
        return "MISSING"


@dataclass
class DataInventory:
    """Inventory of all tutorial datasets."""

    datasets: dict[str, DatasetStatus] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return all(ds.complete for ds in self.datasets.values())

    def to_dataframe(self) -> pd.DataFrame:
        """Convert inventory to one row per file for display/export."""
        rows = []
        for name, ds in self.datasets.items():
            for stage, files in (("raw", ds.raw_files), ("processed", ds.processed_files)):
                for key, path in files.items():
                    rows.append(
                        {
                            "Dataset": name,
                            "Stage": stage,
                            "Table": key,
                            "Exists": path.is_file(),
                            "Path": str(path),
                        }
                    )
        return pd.DataFrame(rows, columns=["Dataset", "Stage", "Table", "Exists", "Path"])

    def print_summary(self) -> None:
        """Print formatted inventory summary."""
        info("=" * 60)
        info("Tutorial Data Inventory")
        info("=" * 60)

        for name, ds in self.datasets.items():
            counts = (
                f"raw {ds.raw_found}/{len(ds.raw_files)}, "
                f"processed {ds.processed_found}/{len(ds.processed_files)}"
            )
            if ds.status == "OK":
                success(f"  [{ds.status}] {name}: {counts}")
            elif ds.status == "PARTIAL":
                warning(f"  [{ds.status}] {name}: {counts}")
                if ds.processable and not ds.complete:
                    info(f"      run: findr-tutorials process {PROCESS_COMMANDS[name]}")
            else:
                error(f"  [{ds.status}] {name}: no files found")


def validate_dataset(name: str, data_dir: Path | None = None) -> DatasetStatus:
    """Collect raw and processed file paths of one dataset."""
    config = DATASETS[name]
    return DatasetStatus(
        name=name,
        raw_files={k: raw_path(name, k, root=data_dir) for k in config["raw_files"]},
        processed_files={k: processed_path(name, k, root=data_dir) for k in config["processed_files"]},
    )


def validate_inventory(data_dir: Path | str | None = None, verbose: bool = True) -> DataInventory:
    """Check raw and processed files of every tutorial dataset.

    Args:
        data_dir: Data root (defaults to config, FINDR_TUTORIALS_DATA or ./data)
        verbose: Print the summary

    Returns:
        DataInventory
    """
    root = resolve_data_dir(data_dir)
    inventory = DataInventory()
    for name in DATASETS:
        inventory.datasets[name] = validate_dataset(name, root)

    if verbose:
        inventory.print_summary()

    return inventory
