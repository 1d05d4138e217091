"""Capitales d'État utilisées comme centre de carte lors du fallback par État."""
from dataclasses import dataclass
from typing import Dict

from app.config import settings


@dataclass(frozen=True)
class StateCenter:
    """Capitale d'un État et ses coordonnées."""
    name: str
    lat: float
    lng: float


STATE_CENTERS: Dict[str, StateCenter] = {
    'AL': StateCenter('Montgomery', 32.3792, -86.3077),
    'AK': StateCenter('Juneau', 58.3019, -134.4197),
    'AZ': StateCenter('Phoenix', 33.4484, -112.0740),
    'AR': StateCenter('Little Rock', 34.7465, -92.2896),
    'CA': StateCenter('Sacramento', 38.5816, -121.4944),
    'CO': StateCenter('Denver', 39.7392, -104.9903),
    'CT': StateCenter('Hartford', 41.7658, -72.6734),
    'DE': StateCenter('Dover', 39.1582, -75.5244),
    'FL': StateCenter('Tallahassee', 30.4383, -84.2807),
    'GA': StateCenter('Atlanta', 33.7490, -84.3880),
    'HI': StateCenter('Honolulu', 21.3069, -157.8583),
    'ID': StateCenter('Boise', 43.6150, -116.2023),
    'IL': StateCenter('Springfield', 39.7817, -89.6501),
    'IN': StateCenter('Indianapolis', 39.7684, -86.1581),
    'IA': StateCenter('Des Moines', 41.5868, -93.6250),
    'KS': StateCenter('Topeka', 39.0473, -95.6752),
    'KY': StateCenter('Frankfort', 38.2007, -84.8732),
    'LA': StateCenter('Baton Rouge', 30.4515, -91.1871),
    'ME': StateCenter('Augusta', 44.3106, -69.7795),
    'MD': StateCenter('Annapolis', 38.9784, -76.4922),
    'MA': StateCenter('Boston', 42.3601, -71.0589),
    'MI': StateCenter('Lansing', 42.7325, -84.5555),
    'MN': StateCenter('St. Paul', 44.9537, -93.0900),
    'MS': StateCenter('Jackson', 32.2988, -90.1848),
    'MO': StateCenter('Jefferson City', 38.5767, -92.1735),
    'MT': StateCenter('Helena', 46.5891, -112.0391),
    'NE': StateCenter('Lincoln', 40.8136, -96.7026),
    'NV': StateCenter('Carson City', 39.1638, -119.7674),
    'NH': StateCenter('Concord', 43.2081, -71.5376),
    'NJ': StateCenter('Trenton', 40.2206, -74.7597),
    'NM': StateCenter('Santa Fe', 35.6870, -105.9378),
    'NY': StateCenter('Albany', 42.6526, -73.7562),
    'NC': StateCenter('Raleigh', 35.7796, -78.6382),
    'ND': StateCenter('Bismarck', 46.8083, -100.7837),
    'OH': StateCenter('Columbus', 39.9612, -82.9988),
    'OK': StateCenter('Oklahoma City', 35.4676, -97.5164),
    'OR': StateCenter('Salem', 44.9429, -123.0351),
    'PA': StateCenter('Harrisburg', 40.2732, -76.8867),
    'RI': StateCenter('Providence', 41.8240, -71.4128),
    'SC': StateCenter('Columbia', 34.0007, -81.0348),
    'SD': StateCenter('Pierre', 44.3683, -100.3510),
    'TN': StateCenter('Nashville', 36.1627, -86.7816),
    'TX': StateCenter('Austin', 30.2672, -97.7431),
    'UT': StateCenter('Salt Lake City', 40.7608, -111.8910),
    'VT': StateCenter('Montpelier', 44.2601, -72.5754),
    'VA': StateCenter('Richmond', 37.5407, -77.4360),
    'WA': StateCenter('Olympia', 47.0379, -122.9007),
    'WV': StateCenter('Charleston', 38.3498, -81.6326),
    'WI': StateCenter('Madison', 43.0731, -89.4012),
    'WY': StateCenter('Cheyenne', 41.1400, -104.8202),
    'DC': StateCenter('Washington', 38.9072, -77.0369),
}


def get_state_center(state_code: str) -> StateCenter:
    """Capitale de l'État, ou celle de l'État par défaut si le code est inconnu."""
    return STATE_CENTERS.get((state_code or "").upper(), STATE_CENTERS[settings.DEFAULT_STATE])
