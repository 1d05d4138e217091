import math
from typing import List

from app.models import Listing


class Ranker:
    def rank(self, listings: List[Listing]) -> List[Listing]:
        # tri stable : distance croissante, distance inconnue en dernier
        return sorted(
            listings,
            key=lambda x: (x.distance is None, x.distance if x.distance is not None else math.inf)
        )
