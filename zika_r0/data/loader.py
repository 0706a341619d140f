"""
Data Loader for Zika R0 estimation

This module handles:
1. Loading cumulative case counts per department and week
2. Validating department ids and week-0 coverage
3. Deriving observed intercepts and building the Stan data dictionaries
4. Loading the climate classification used by the ANOVA model

Input files are delimited text with a header row. Columns are taken by
position, so header names are not significant.
"""
import pandas as pd
import numpy as np
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


OBSERVATION_COLUMNS = ['department', 'week', 'cases']
CLIMATE_COLUMNS = ['department', 'climate']


def _read_table(path: str, delimiter: str, columns: List[str]) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    df = pd.read_csv(path, sep=delimiter)
    if df.shape[1] < len(columns):
        raise ValueError(
            f"{path.name}: expected at least {len(columns)} columns "
            f"({', '.join(columns)}), got {df.shape[1]}"
        )

    df = df.iloc[:, :len(columns)].copy()
    df.columns = columns
    return df


def check_dense_ids(ids: pd.Series, label: str = 'department') -> int:
    """
    Check that ids are integers 1..N with no gaps.

    Args:
        ids: Series of integer ids
        label: Name used in error messages

    Returns:
        N, the number of distinct ids
    """
    unique = np.sort(ids.unique())
    if len(unique) == 0:
        raise ValueError(f"No {label} ids found")
    expected = np.arange(1, len(unique) + 1)
    if not np.array_equal(unique, expected):
        missing = sorted(set(range(1, int(unique.max()) + 1)) - set(unique.tolist()))
        raise ValueError(
            f"{label} ids must be dense integers starting at 1; "
            f"got min={unique.min()}, max={unique.max()}, missing={missing}"
        )
    return len(unique)


def load_observations(path: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Load cumulative case counts and log-transform them.

    Args:
        path: Path to delimited file with columns [department, week, cases]
        delimiter: Field delimiter

    Returns:
        DataFrame with columns: department, week, cases, ln_y (file order kept)
    """
    df = _read_table(path, delimiter, OBSERVATION_COLUMNS)

    for col in OBSERVATION_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce')

    bad_rows = df[OBSERVATION_COLUMNS].isna().any(axis=1)
    if bad_rows.any():
        first = int(np.flatnonzero(bad_rows.values)[0])
        raise ValueError(
            f"{bad_rows.sum()} rows with missing or non-numeric values "
            f"(first at data row {first + 1})"
        )

    for col in ['department', 'week']:
        if not np.all(np.mod(df[col].values, 1) == 0):
            raise ValueError(f"Column '{col}' must contain integers")
        df[col] = df[col].astype(int)

    if (df['week'] < 0).any():
        raise ValueError("Week index must be >= 0")

    # Log of a non-positive count is undefined
    if (df['cases'] <= 0).any():
        n_bad = int((df['cases'] <= 0).sum())
        raise ValueError(f"Case counts must be positive ({n_bad} rows are not)")

    check_dense_ids(df['department'])

    df['cases'] = df['cases'].astype(float)
    df['ln_y'] = np.log(df['cases'])

    return df.reset_index(drop=True)


def check_week_zero(df: pd.DataFrame) -> List[int]:
    """
    Find departments with no week-0 observation.

    Args:
        df: Observations from load_observations()

    Returns:
        Sorted list of department ids lacking a week-0 row (empty if none)
    """
    all_ids = set(range(1, int(df['department'].max()) + 1))
    with_zero = set(df.loc[df['week'] == 0, 'department'].astype(int))
    return sorted(all_ids - with_zero)


def derive_intercepts(df: pd.DataFrame) -> np.ndarray:
    """
    Extract observed intercepts (log cases at week 0) per department.

    Because weeks are coded from 0, each department has an observed
    intercept. If a department has several week-0 rows the first one in
    file order is used.

    Args:
        df: Observations from load_observations()

    Returns:
        Array of length N; element j-1 belongs to department j
    """
    missing = check_week_zero(df)
    if missing:
        raise ValueError(f"No week-0 observation for departments: {missing}")

    week0 = df[df['week'] == 0].drop_duplicates(subset='department', keep='first')
    week0 = week0.set_index('department')['ln_y'].sort_index()
    return week0.values.astype(float)


def build_regression_data(
    df: pd.DataFrame,
    serial_interval: Tuple[float, float] = (10.0, 23.0)
) -> Dict[str, Any]:
    """
    Prepare data dictionary for the hierarchical regression Stan model.

    Args:
        df: Observations from load_observations()
        serial_interval: (lower, upper) bounds of the uniform serial interval, days

    Returns:
        Dictionary formatted for Stan
    """
    si_lower, si_upper = (float(v) for v in serial_interval)
    if not 0 < si_lower < si_upper:
        raise ValueError(
            f"Serial interval bounds must satisfy 0 < lower < upper, got {serial_interval}"
        )

    intercept = derive_intercepts(df)

    return {
        'N': len(df),
        'J': len(intercept),
        'dept': df['department'].values.astype(int),
        'x': df['week'].values.astype(float),
        'ln_y': df['ln_y'].values.astype(float),
        'intercept': intercept,
        'si_lower': si_lower,
        'si_upper': si_upper,
    }


def sort_class_labels(labels) -> List:
    """
    Sort class labels, numerically when every label is an integer.

    Labels read from file are strings, so '10' would otherwise sort before '2'.
    """
    labels = list(labels)
    try:
        return sorted(labels, key=lambda c: int(str(c).strip()))
    except ValueError:
        return sorted(labels, key=str)


def load_climate_classes(path: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Load climate classification per department.

    Args:
        path: Path to delimited file with columns [department, climate]
        delimiter: Field delimiter

    Returns:
        DataFrame with columns: department, climate, climate_id
        (climate_id is 1..K in sorted order of the class label)
    """
    df = _read_table(path, delimiter, CLIMATE_COLUMNS)

    df['department'] = pd.to_numeric(df['department'], errors='coerce')
    if df['department'].isna().any() or df['climate'].isna().any():
        raise ValueError("Climate table has missing department ids or classes")
    df['department'] = df['department'].astype(int)

    if df['department'].duplicated().any():
        dupes = sorted(df.loc[df['department'].duplicated(), 'department'].unique())
        raise ValueError(f"Departments listed more than once in climate table: {dupes}")

    df['climate'] = df['climate'].astype(str).str.strip()
    classes = sort_class_labels(df['climate'].unique())
    df['climate_id'] = df['climate'].map({c: i + 1 for i, c in enumerate(classes)})

    return df.sort_values('department').reset_index(drop=True)


def build_anova_data(
    values_df: pd.DataFrame,
    climate_df: pd.DataFrame,
    value_col: str = 'r0_mean'
) -> Dict[str, Any]:
    """
    Prepare data dictionary for the one-way ANOVA Stan model.

    Joins per-department values (e.g. R0 estimates) with climate classes.
    Class ids are re-encoded densely over the classes actually present.

    Args:
        values_df: DataFrame with 'department' and value_col
        climate_df: DataFrame from load_climate_classes()
        value_col: Column holding the response

    Returns:
        Dictionary formatted for Stan, plus 'classes' (label per class id)
    """
    merged = values_df[['department', value_col]].merge(
        climate_df[['department', 'climate']],
        on='department',
        how='left'
    )

    unmatched = merged.loc[merged['climate'].isna(), 'department'].tolist()
    if unmatched:
        raise ValueError(f"No climate class for departments: {sorted(unmatched)}")

    classes = sort_class_labels(merged['climate'].unique())
    if len(classes) < 2:
        raise ValueError(f"ANOVA needs at least two climate classes, got {classes}")

    x = merged['climate'].map({c: i + 1 for i, c in enumerate(classes)})

    return {
        'N': len(merged),
        'K': len(classes),
        'x': x.values.astype(int),
        'y': merged[value_col].values.astype(float),
        'classes': classes,
    }


def stan_data_only(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop bookkeeping keys that are not Stan data variables."""
    return {k: v for k, v in data.items() if k != 'classes'}


def load_regression_inputs(
    path: str,
    delimiter: str = ",",
    serial_interval: Optional[Tuple[float, float]] = None
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Load observations and build the regression Stan data in one step.

    Returns:
        (observations DataFrame, Stan data dictionary)
    """
    print(f"Loading observations from {path}...")
    df = load_observations(path, delimiter=delimiter)
    print(f"  → {len(df)} rows, {df['department'].nunique()} departments, "
          f"weeks {df['week'].min()}-{df['week'].max()}")

    data = build_regression_data(df, serial_interval or (10.0, 23.0))
    return df, data
