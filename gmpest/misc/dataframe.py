## --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022, CentraleSupelec
# License: GPLv3 (see LICENSE)
## --------------------------------------------------------------

import numpy as np


def ftos(x, fp=3):
    if np.isnan(x):
        return "NaN"
    if x == float('inf'):
        return "+Inf"
    elif x == float('-inf'):
        return "-Inf"
    abs_x = abs(x)
    if x == 0:
        return "0.0"
    elif abs_x >= 0.1 and abs_x < 1000:
        return f"{x:.{fp}f}"
    elif abs_x >= 0.01 and abs_x < 0.1:
        return f"{x:.{fp+1}f}"
    else:
        exponent = int(np.floor(np.log10(abs_x)))
        coeff = x / 10**exponent
        return f"{coeff:.{fp}f}e{exponent}"


class DataFrame:
    """Small labelled 2D table used to display estimation summaries."""

    def __init__(self, data, colnames, rownames):
        self.data = np.atleast_2d(np.array(data, dtype=float))
        self.rownames = list(rownames)
        self.colnames = list(colnames)
        if self.data.shape != (len(self.rownames), len(self.colnames)):
            raise ValueError(
                f"data has shape {self.data.shape} but {len(self.rownames)} rows "
                f"and {len(self.colnames)} columns are named"
            )

    @property
    def shape(self):
        return self.data.shape

    def __getitem__(self, key):
        if isinstance(key, tuple):
            row_key, col_key = key
            return self.data[self.rownames.index(row_key), self.colnames.index(col_key)]
        elif isinstance(key, str):
            if key in self.rownames:
                return DataFrame(self.data[self.rownames.index(key), :], self.colnames, [key])
            elif key in self.colnames:
                return DataFrame(self.data[:, [self.colnames.index(key)]], [key], self.rownames)
            else:
                raise KeyError(f"Key '{key}' not found in row or column names")
        else:
            raise TypeError("Invalid key type. Must be a tuple or a string.")

    def __repr__(self):
        header = [[''] + self.colnames]
        rows = header + \
            [[self.rownames[i] + ':'] + \
             [ftos(self.data[i, j]) for j in range(self.data.shape[1])] \
             for i in range(self.data.shape[0])]

        min_width = 8
        col_widths = [max(min_width, max(len(str(rows[i][j])) for i in range(len(rows)))) \
                      for j in range(len(rows[0]))]

        formatted_rows = [' '.join(str(rows[i][j]).rjust(col_widths[j]) \
                                   for j in range(len(rows[0]))) \
                          for i in range(len(rows))]

        return '\n'.join(formatted_rows)

    def to_dict(self):
        """{row name: {column name: value}}."""
        return {
            r: {c: float(self.data[i, j]) for j, c in enumerate(self.colnames)}
            for i, r in enumerate(self.rownames)
        }
