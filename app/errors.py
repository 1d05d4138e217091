"""Exceptions métier du service."""
from typing import Any, Dict, Optional


class LocatorError(Exception):
    """Erreur de base de l'application."""


class BackendError(LocatorError):
    """Échec d'un appel au backend REST (réseau ou statut non 2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None, path: str = ""):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.path = path


class GeolocationError(LocatorError):
    """Position de l'appareil absente ou invalide."""


class ReverseGeocodeError(LocatorError):
    """Le géocodeur n'a pas pu résoudre les coordonnées."""


class SearchUnavailableError(LocatorError):
    """Toute la chaîne de fallback a échoué."""

    def __init__(self, message: str, attempts: Optional[list] = None):
        super().__init__(message)
        self.attempts = attempts or []


class PaymentError(LocatorError):
    """Échec signalé par le fournisseur de paiement ou à la création de l'intent."""

    def __init__(self, message: str, title: str = "Payment Failed"):
        super().__init__(message)
        self.message = message
        self.title = title

    def to_notification(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.message,
            "variant": "destructive",
        }
