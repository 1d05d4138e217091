"""Modèles Pydantic pour les listings, la localisation et les pages."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.config import settings

Granularity = Literal["point", "state", "city"]
LocationStatus = Literal["success", "error"]
NotificationStatus = Literal["unread", "read", "contacted"]


class CamelModel(BaseModel): # pylint: disable=too-few-public-methods
    """Base acceptant le camelCase du backend et le snake_case Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(BaseModel): # pylint: disable=too-few-public-methods
    """Paire latitude / longitude."""
    lat: float
    lng: float


class Location(CamelModel): # pylint: disable=too-few-public-methods
    """Localisation résolue pour une recherche (éphémère)."""
    latitude: float
    longitude: float
    display_name: str
    state_code: str = settings.DEFAULT_STATE

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(lat=self.latitude, lng=self.longitude)


class Listing(CamelModel):
    """Une laverie telle que renvoyée par le backend."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    name: str
    slug: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    phone: Optional[str] = None
    website: Optional[str] = None
    # Le backend envoie les coordonnées et la note sous forme de chaînes
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    hours: Optional[str] = None
    services: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    description: Optional[str] = None
    is_premium: bool = False
    is_featured: bool = False
    google_data: Optional[Dict[str, Any]] = None
    distance: Optional[float] = None

    @field_validator("latitude", "longitude", "rating", "distance", mode="before")
    @classmethod
    def _to_float(cls, value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("services", mode="before")
    @classmethod
    def _services_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [s.strip() for s in value.split(",") if s.strip()]
        return list(value)

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(lat=self.latitude, lng=self.longitude)

    @property
    def open_now(self) -> Optional[bool]:
        """Statut d'ouverture fourni par les données Google, s'il existe."""
        if not self.google_data:
            return None
        hours = self.google_data.get("opening_hours") or {}
        return hours.get("open_now")


class Filter(CamelModel): # pylint: disable=too-few-public-methods
    """Filtres choisis par l'utilisateur."""
    open_now: Optional[bool] = None
    services: Optional[List[str]] = None
    rating: Optional[int] = None

    def to_params(self) -> Dict[str, str]:
        """Paramètres de requête sortants pour le backend."""
        params: Dict[str, str] = {}
        if self.open_now:
            params["openNow"] = "true"
        if self.services:
            params["services"] = ",".join(self.services)
        if self.rating:
            params["rating"] = str(self.rating)
        return params

    @property
    def is_empty(self) -> bool:
        return not (self.open_now or self.services or self.rating)


class MapView(BaseModel): # pylint: disable=too-few-public-methods
    """Centre et zoom de la carte, selon la granularité des données."""
    center: Coordinates
    zoom: int
    granularity: Granularity


class PanelLink(BaseModel): # pylint: disable=too-few-public-methods
    label: str
    href: str


class ErrorPanel(BaseModel): # pylint: disable=too-few-public-methods
    """Panneau d'erreur avec bouton « Try Again »."""
    title: str = "Error"
    message: str
    retry: bool = True


class NoResultsPanel(BaseModel): # pylint: disable=too-few-public-methods
    """Panneau « aucun résultat » (état terminal valide, pas une erreur)."""
    title: str
    message: str
    links: List[PanelLink] = Field(default_factory=list)


class RecentSearch(BaseModel): # pylint: disable=too-few-public-methods
    query: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    timestamp: int


class ListingsPage(CamelModel):
    """Vue d'une page de résultats."""
    location_name: str = ""
    location: Optional[Location] = None
    location_status: Optional[LocationStatus] = None
    radius: Optional[int] = None
    listings: List[Listing] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = settings.DEFAULT_PER_PAGE
    map: Optional[MapView] = None
    no_results: Optional[NoResultsPanel] = None
    redirect: Optional[str] = None
    filters: Filter = Field(default_factory=Filter)
    query_time_ms: Optional[float] = None
    memory_used_mb: Optional[float] = None
    recent_searches: List[RecentSearch] = Field(default_factory=list)


class CityPage(ListingsPage):
    city: Dict[str, Any] = Field(default_factory=dict)


class StatePage(ListingsPage):
    state: Dict[str, Any] = Field(default_factory=dict)
    cities: List[Dict[str, Any]] = Field(default_factory=list)


class LaundryDetailPage(CamelModel): # pylint: disable=too-few-public-methods
    laundromat: Listing
    reviews: List[Dict[str, Any]] = Field(default_factory=list)
    distance_label: Optional[str] = None
    is_favorite: bool = False


class FavoriteState(CamelModel): # pylint: disable=too-few-public-methods
    laundry_id: int
    favorite: bool


# --- Administration -------------------------------------------------------

class Notification(CamelModel):
    """Notification de modération (revendication de fiche, etc.)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    status: NotificationStatus = "unread"
    type: Optional[str] = None
    created_at: Optional[str] = None
    contact: Dict[str, Any] = Field(default_factory=dict)
    laundromat: Dict[str, Any] = Field(default_factory=dict)
    user: Dict[str, Any] = Field(default_factory=dict)


class NotificationStatusUpdate(BaseModel): # pylint: disable=too-few-public-methods
    status: NotificationStatus


class NotificationsPage(BaseModel): # pylint: disable=too-few-public-methods
    tab: str
    notifications: List[Notification]
    counts: Dict[str, int]


# --- Formulaires ----------------------------------------------------------

class LoginForm(CamelModel): # pylint: disable=too-few-public-methods
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterForm(CamelModel):
    """Formulaire d'inscription ; la confirmation n'est jamais envoyée au backend.

    `password` n'a pas d'autre contrainte que d'être une chaîne : il est donc
    toujours dans `info.data` quand la confirmation est vérifiée.
    """
    username: str = Field(min_length=1)
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Passwords do not match")
        return value

    def to_backend(self) -> Dict[str, str]:
        return {"username": self.username, "password": self.password, "email": self.email}


class DemoLoginRequest(BaseModel): # pylint: disable=too-few-public-methods
    role: str = "owner"


class ClaimRequest(CamelModel):
    """Demande de revendication d'une fiche par son propriétaire."""
    laundry_id: int
    owner_name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=7)
    business_role: str = "owner"
    message: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def _phone_digits(cls, value: str) -> str:
        digits = [c for c in value if c.isdigit()]
        if len(digits) < 10:
            raise ValueError("Please enter a valid phone number")
        return value


# --- Abonnement / paiement ------------------------------------------------

class SubscriptionIntent(CamelModel): # pylint: disable=too-few-public-methods
    laundry_id: int
    client_secret: str
    publishable_key: str


class PaymentResult(CamelModel): # pylint: disable=too-few-public-methods
    """Résultat remonté par l'UI hébergée du fournisseur de paiement."""
    status: Literal["succeeded", "failed"]
    error_message: Optional[str] = None


class BusinessMatch(BaseModel): # pylint: disable=too-few-public-methods
    listing: Listing
    score: float


class BusinessDashboardPage(BaseModel): # pylint: disable=too-few-public-methods
    dashboard: Dict[str, Any] = Field(default_factory=dict)
    reviews: List[Dict[str, Any]] = Field(default_factory=list)
    analytics: Dict[str, Any] = Field(default_factory=dict)
