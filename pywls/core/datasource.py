"""
Universal DataSource for pywls.

DataSource is the "I have data" abstraction. It doesn't know or care
that a regression will consume it. It just provides named arrays.

Usage:
    from pywls.core.datasource import DataSource

    ds = DataSource.from_arrays(x1=x1, x2=x2, y=y, w=w)
    ds = DataSource.from_file("data.csv")
    ds = DataSource.from_dataframe(df)

    # Access arrays
    ds.keys()  # frozenset({'x1', 'x2', 'y', 'w'})
    y = ds['y']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pywls.core.exceptions import ValidationError

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Named-array container. Domain-agnostic.

    Construct via factory classmethods, not directly.
    """
    _data: dict[str, Any]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Array Access ===

    def keys(self) -> frozenset[str]:
        """Return the names of all available arrays."""
        return frozenset(k for k in self._data.keys() if not k.startswith('_'))

    def __getitem__(self, key: str) -> Any:
        """
        Access a named array.

        Raises:
            KeyError: If key not found, with message listing available keys
        """
        if key not in self._data:
            available = self.keys()
            raise KeyError(
                f"DataSource has no array '{key}'. Available: {available}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        """Check if a key exists."""
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        """Source metadata (origin, columns, path)."""
        return self._metadata.copy()

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        data: NDArray | None = None,
        columns: list[str] | None = None,
        **named_arrays: NDArray,
    ) -> DataSource:
        """
        Construct from NumPy arrays.

        Either pass named 1D/2D arrays as keywords, or a 2D ``data``
        matrix with matching ``columns`` names.
        """
        storage: dict[str, Any] = {}
        n_obs: int | None = None

        if data is not None:
            data = np.asarray(data, dtype=np.float64)
            n_obs = data.shape[0]
            if columns is not None:
                if data.ndim != 2 or data.shape[1] != len(columns):
                    raise ValidationError(
                        f"data: shape {data.shape} does not match {len(columns)} column names"
                    )
                for i, col in enumerate(columns):
                    storage[col] = data[:, i]
            else:
                storage['_data'] = data

        for name, arr in named_arrays.items():
            storage[name] = np.asarray(arr, dtype=np.float64)
            n_obs = n_obs or storage[name].shape[0]

        return cls(
            _data=storage,
            _metadata={'n_observations': n_obs, 'source': 'arrays'},
        )

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from file (CSV, TSV, NPY)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, sep=sep, usecols=columns)
            return cls.from_dataframe(df, source_path=str(path))
        elif suffix == '.npy':
            data = np.load(path)
            return cls.from_arrays(data=data, columns=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """Construct from pandas DataFrame. Every column becomes a float64 array."""
        storage: dict[str, Any] = {}

        for col in df.columns:
            storage[str(col)] = df[col].to_numpy(dtype=np.float64)

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
            'columns': [str(c) for c in df.columns],
        }
        if source_path:
            metadata['source_path'] = source_path

        return cls(_data=storage, _metadata=metadata)
