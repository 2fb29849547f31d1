"""Containers for pairwise alignment hits and the directional identity scores folded from them."""
from typing import Iterable, Optional, Iterator

import numpy as np


# Classes --------------------------------------------------------------------------------------------------------------
class Hit:
    """
    One row of tabular alignment output.

    Args:
        query: Query label.
        subject: Subject label.
        identity: Percent identity, 0 to 100.
        length: Number of aligned positions.

    Examples:
        >>> h = Hit(b'seqA', b'seqB', 98.5, 1200)
        >>> h.identity
        98.5
    """
    __slots__ = ('query', 'subject', 'identity', 'length')

    def __init__(self, query: bytes, subject: bytes, identity: float, length: int):
        self.query = query
        self.subject = subject
        self.identity = identity
        self.length = length

    def __iter__(self): return iter((self.query, self.subject, self.identity, self.length))
    def __eq__(self, other): return isinstance(other, Hit) and tuple(self) == tuple(other)
    def __hash__(self): return hash(tuple(self))
    def __repr__(self):
        return f"Hit({self.query.decode(errors='replace')}->{self.subject.decode(errors='replace')}, {self.identity}%, {self.length}bp)"


class ScoreMap:
    """
    Directional identity scores, ``query -> subject -> identity``.

    Lookups never create entries; a missing pair is reported as ``None``.
    Setting a pair again replaces the earlier value.

    Examples:
        >>> scores = ScoreMap.from_hits([Hit(b'A', b'B', 90.0, 500)], min_length=100)
        >>> scores.get(b'A', b'B'), scores.get(b'B', b'A')
        (90.0, None)
    """
    __slots__ = ('_scores', '_n_pairs')

    def __init__(self):
        self._scores: dict[bytes, dict[bytes, float]] = {}
        self._n_pairs = 0

    @classmethod
    def from_hits(cls, hits: Iterable[Hit], min_length: int = 0) -> 'ScoreMap':
        """
        Folds hits into a score map.

        Hits shorter than `min_length` are dropped before they can replace anything;
        of the remaining hits the last one for each (query, subject) wins.

        Args:
            hits: Alignment hits in file order.
            min_length: Inclusive lower bound on alignment length.
        """
        scores = cls()
        for hit in hits:
            if hit.length < min_length: continue
            scores.set(hit.query, hit.subject, hit.identity)
        return scores

    def get(self, query: bytes, subject: bytes) -> Optional[float]:
        if (row := self._scores.get(query)) is None: return None
        return row.get(subject)

    def labels(self) -> set[bytes]:
        """All labels seen as a query or a subject."""
        seen = set(self._scores)
        for row in self._scores.values(): seen.update(row)
        return seen

    def set(self, query: bytes, subject: bytes, identity: float):
        if (row := self._scores.get(query)) is None: row = self._scores[query] = {}
        if subject not in row: self._n_pairs += 1
        row[subject] = float(identity)

    def to_array(self, labels: Iterable[bytes]) -> np.ndarray:
        """
        Lays the scores out as a dense (N x N) float array in `labels` order.

        Missing pairs are NaN; pairs involving labels outside `labels` are left out.
        """
        labels = tuple(labels)
        index = {label: i for i, label in enumerate(labels)}
        out = np.full((len(labels), len(labels)), np.nan, dtype=np.float64)
        for query, row in self._scores.items():
            if (i := index.get(query)) is None: continue
            for subject, identity in row.items():
                if (j := index.get(subject)) is not None: out[i, j] = identity
        return out

    def __contains__(self, pair: tuple[bytes, bytes]) -> bool: return self.get(*pair) is not None
    def __len__(self) -> int: return self._n_pairs
    def __iter__(self) -> Iterator[tuple[bytes, bytes, float]]:
        for query, row in self._scores.items():
            for subject, identity in row.items(): yield query, subject, identity
    def __repr__(self): return f"ScoreMap(pairs={self._n_pairs})"
