"""Similarité de noms pour la recherche de fiches côté propriétaires."""
import re
import unicodedata
from functools import lru_cache

import Levenshtein as lev


class NameSimilarity:
    """Score de proximité entre une requête et un nom d'établissement."""

    @staticmethod
    def normalize(text: str) -> str:
        """Minuscules, sans accents ni ponctuation, espaces compactés."""
        text = unicodedata.normalize("NFKD", text or "")
        text = "".join(c for c in text if not unicodedata.combining(c))
        text = re.sub(r"[^a-z0-9 ]+", " ", text.lower())
        return " ".join(text.split())

    @lru_cache(maxsize=4096)
    def score(self, query: str, name: str) -> float:
        """
        Score entre 0 et 1.

        Un nom qui contient la requête entière obtient au moins 0.9 ; sinon on
        garde le meilleur ratio de Levenshtein entre le nom complet et chacun
        de ses mots.
        """
        q = self.normalize(query)
        n = self.normalize(name)
        if not q or not n:
            return 0.0
        if q == n:
            return 1.0

        best = lev.ratio(q, n)
        for word in n.split():
            best = max(best, lev.ratio(q, word))
        if q in n:
            best = max(best, 0.9)
        return round(best, 4)


name_similarity = NameSimilarity()
