"""Reading, writing and generating pallet loading instances.

Datasets are stored as a pair of CSV files:

    TruckAndPallets_<X>.csv   header row, then: capacity, pallets
    Pallets_<X>.csv           header row, then: id, weight, profit

Columns are read by position; whitespace around fields is ignored. A JSON
format with the same content is supported for hand-written instances.
"""

import json
import os
from pathlib import Path

import numpy as np
import pandas as pd

from .models import Pallet, Truck


class DatasetError(ValueError):
    """Raised when a dataset file violates the expected layout."""


def truck_file(data_dir, dataset_id):
    return Path(data_dir) / f"TruckAndPallets_{dataset_id}.csv"


def pallets_file(data_dir, dataset_id):
    return Path(data_dir) / f"Pallets_{dataset_id}.csv"


def _read_csv(path, min_columns):
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    try:
        df = pd.read_csv(path, skipinitialspace=True)
    except pd.errors.EmptyDataError as exc:
        raise DatasetError(f"{path}: file is empty") from exc
    if df.shape[1] < min_columns:
        raise DatasetError(f"{path}: expected at least {min_columns} columns, got {df.shape[1]}")
    # Rows with missing fields are skipped
    df = df.iloc[:, :min_columns].dropna()
    try:
        return df.astype("int64")
    except (TypeError, ValueError) as exc:
        raise DatasetError(f"{path}: non-integer value ({exc})") from exc


def parse_truck(path):
    """Read the truck capacities from the first data row of a CSV file.

    Raises:
        FileNotFoundError: If path does not exist
        DatasetError: If the file has no complete data row
    """
    df = _read_csv(path, 2)
    if df.empty:
        raise DatasetError(f"No valid truck data found in file: {path}")
    capacity, count = df.iloc[0].tolist()
    return Truck(max_weight=int(capacity), max_pallets=int(count))


def parse_pallets(path):
    """Read all pallets from a CSV file.

    Raises:
        FileNotFoundError: If path does not exist
        DatasetError: On malformed values or duplicate ids
    """
    df = _read_csv(path, 3)
    df.columns = ["id", "weight", "profit"]
    duplicated = df["id"][df["id"].duplicated()].unique().tolist()
    if duplicated:
        raise DatasetError(f"{path}: duplicate pallet ids {duplicated}")
    return [Pallet(id=int(r.id), weight=int(r.weight), profit=int(r.profit))
            for r in df.itertuples(index=False)]


def load_dataset(data_dir, dataset_id):
    """Load truck and pallets for one dataset identifier.

    Args:
        data_dir: Directory holding the CSV files
        dataset_id: The <X> in the file names

    Returns:
        tuple: (truck, pallets)
    """
    truck = parse_truck(truck_file(data_dir, dataset_id))
    pallets = parse_pallets(pallets_file(data_dir, dataset_id))
    return truck, pallets


def write_dataset(data_dir, dataset_id, truck, pallets):
    """Write an instance in the CSV layout read by load_dataset."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(
        [{"Capacity": truck.max_weight, "Pallets": truck.max_pallets}]
    ).to_csv(truck_file(data_dir, dataset_id), index=False)
    pd.DataFrame(
        [{"Pallet": p.id, "Weight": p.weight, "Profit": p.profit} for p in pallets],
        columns=["Pallet", "Weight", "Profit"],
    ).to_csv(pallets_file(data_dir, dataset_id), index=False)


def load_instance_json(path):
    """Load an instance from a JSON file.

    Expects format:
    {
        "truck": {"max_weight": 10, "max_pallets": 2},
        "pallets": [{"id": 1, "weight": 6, "profit": 30}, ...]
    }

    Raises:
        FileNotFoundError: If path does not exist
        DatasetError: On missing keys or duplicate ids
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, "r") as f:
        data = json.load(f)
    try:
        truck = Truck(**data["truck"])
        pallets = [Pallet(**p) for p in data.get("pallets", [])]
    except (KeyError, TypeError) as exc:
        raise DatasetError(f"{path}: malformed instance ({exc})") from exc
    ids = [p.id for p in pallets]
    if len(ids) != len(set(ids)):
        raise DatasetError(f"{path}: duplicate pallet ids")
    return truck, pallets


def generate_instance(n, seed=None, max_item_weight=20, max_item_profit=50,
                      weight_fraction=0.4, count_fraction=0.3):
    """Generate a random instance.

    Args:
        n: Number of pallets (ids 1..n)
        seed: Seed for numpy's random generator
        max_item_weight: Pallet weights are drawn from 1..max_item_weight
        max_item_profit: Pallet profits are drawn from 0..max_item_profit
        weight_fraction: Truck weight capacity as a fraction of total weight
        count_fraction: Truck pallet capacity as a fraction of n

    Returns:
        tuple: (truck, pallets)
    """
    rng = np.random.default_rng(seed)
    weights = rng.integers(1, max_item_weight + 1, size=n)
    profits = rng.integers(0, max_item_profit + 1, size=n)
    pallets = [Pallet(id=i + 1, weight=int(w), profit=int(p))
               for i, (w, p) in enumerate(zip(weights, profits))]
    truck = Truck(max_weight=int(weights.sum() * weight_fraction),
                  max_pallets=max(1, int(n * count_fraction)))
    return truck, pallets
