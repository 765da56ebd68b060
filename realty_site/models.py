"""
Data models for the realty site.

This module defines the core data structures used throughout the application.
Rows arriving from the external store are loosely typed dictionaries; they are
converted into these dataclasses at the boundary so optional fields are
explicit.
"""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from realty_site.error_handling import CriteriaError


class PropertyType(str, Enum):
    """Kind of property"""
    APARTMENT = "apartment"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    LAND = "land"


class PropertyStatus(str, Enum):
    """Market status of a property"""
    LAUNCH = "launch"
    NEW = "new"
    USED = "used"


STATUS_LABELS = {
    PropertyStatus.LAUNCH.value: "Lançamento",
    PropertyStatus.NEW.value: "Novo",
    PropertyStatus.USED.value: "Usado",
}


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_optional_int(value: Any, field_name: str) -> Optional[int]:
    """Parse a form value into an int, treating blanks as absent.

    Raises:
        CriteriaError: If the value is not a non-negative integer
    """
    if _blank(value):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        raise CriteriaError(f"{field_name} must be a whole number, got {value!r}")
    if number < 0:
        raise CriteriaError(f"{field_name} cannot be negative")
    return number


def parse_optional_float(value: Any, field_name: str) -> Optional[float]:
    """Parse a form value into a float, treating blanks as absent.

    Raises:
        CriteriaError: If the value is not a non-negative number
    """
    if _blank(value):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        raise CriteriaError(f"{field_name} must be a number, got {value!r}")
    if number < 0:
        raise CriteriaError(f"{field_name} cannot be negative")
    return number


def parse_price_range(value: Any) -> tuple:
    """Split a ``"min-max"`` price range into two optional bounds.

    Either side may be empty: ``"5000000-"`` means no upper bound and
    ``"-500000"`` means no lower bound.
    """
    if _blank(value):
        return None, None
    text = str(value).strip()
    if "-" not in text:
        raise CriteriaError(f"Price range must look like 'min-max', got {text!r}")
    low, high = text.split("-", 1)
    return (
        parse_optional_float(low, "priceRange minimum"),
        parse_optional_float(high, "priceRange maximum"),
    )


@dataclass
class SearchCriteria:
    """User filter selections for a property search.

    Every empty or absent field means "no constraint on this dimension", so
    an all-empty criteria matches every property.

    Attributes:
        location: Free text matched against neighborhood, city and region
        property_type: One of PropertyType values, or "" for any
        status: One of PropertyStatus values, or "" for any
        bedrooms_min: Minimum bedrooms (N+)
        suites_min: Minimum suites (N+)
        parking_min: Minimum parking spots (N+)
        price_min: Inclusive lower price bound
        price_max: Inclusive upper price bound
    """
    location: str = ""
    property_type: str = ""
    status: str = ""
    bedrooms_min: Optional[int] = None
    suites_min: Optional[int] = None
    parking_min: Optional[int] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None

    def __post_init__(self):
        """Normalize enum members and validate choice fields."""
        if isinstance(self.property_type, PropertyType):
            self.property_type = self.property_type.value
        if isinstance(self.status, PropertyStatus):
            self.status = self.status.value
        self.location = self.location or ""
        self.property_type = self.property_type or ""
        self.status = self.status or ""

        if self.property_type and self.property_type not in {t.value for t in PropertyType}:
            raise CriteriaError(f"Unknown property type: {self.property_type!r}")
        if self.status and self.status not in {s.value for s in PropertyStatus}:
            raise CriteriaError(f"Unknown property status: {self.status!r}")

    def is_empty(self) -> bool:
        """Return True when no dimension is constrained."""
        return (
            not self.location.strip()
            and not self.property_type
            and not self.status
            and self.bedrooms_min is None
            and self.suites_min is None
            and self.parking_min is None
            and self.price_min is None
            and self.price_max is None
        )

    def location_parts(self) -> List[str]:
        """Split the location text on '-' and return the non-empty trimmed parts."""
        return [part.strip() for part in self.location.split("-") if part.strip()]

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> 'SearchCriteria':
        """Create criteria from the raw search form fields.

        The form uses the public field names (``location``, ``propertyType``,
        ``propertyStatus``, ``priceRange``, ``bedrooms``, ``suites``,
        ``parkingSpots``) with string values; blanks mean "any".

        Args:
            form: Mapping of form field names to raw values

        Returns:
            SearchCriteria instance

        Raises:
            CriteriaError: If a field cannot be parsed
        """
        price_min, price_max = parse_price_range(form.get("priceRange"))
        return cls(
            location=str(form.get("location") or ""),
            property_type=str(form.get("propertyType") or ""),
            status=str(form.get("propertyStatus") or ""),
            bedrooms_min=parse_optional_int(form.get("bedrooms"), "bedrooms"),
            suites_min=parse_optional_int(form.get("suites"), "suites"),
            parking_min=parse_optional_int(form.get("parkingSpots"), "parkingSpots"),
            price_min=price_min,
            price_max=price_max,
        )

    def to_form(self) -> Dict[str, str]:
        """Convert criteria back to the string form shape.

        Returns:
            Dictionary keyed by the public form field names
        """
        def fmt(number: Optional[float]) -> str:
            if number is None:
                return ""
            return str(int(number)) if float(number).is_integer() else str(number)

        price_range = ""
        if self.price_min is not None or self.price_max is not None:
            price_range = f"{fmt(self.price_min)}-{fmt(self.price_max)}"

        return {
            "location": self.location,
            "propertyType": self.property_type,
            "propertyStatus": self.status,
            "priceRange": price_range,
            "bedrooms": fmt(self.bedrooms_min),
            "suites": fmt(self.suites_min),
            "parkingSpots": fmt(self.parking_min),
        }


@dataclass
class PropertyRecord:
    """A property as stored in the external ``properties`` collection.

    Attributes:
        id: Store identifier
        title: Listing title
        price: Asking price
        location: Neighborhood or district
        city: City name
        region: State or region
        type: PropertyType value
        status: PropertyStatus value
        display_status: Free-text label overriding the status badge
        images: Storage paths or absolute URLs
    """
    id: str
    title: str
    price: Optional[float] = None
    description: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    display_status: Optional[str] = None
    bedrooms: Optional[int] = None
    suites: Optional[int] = None
    bathrooms: Optional[int] = None
    parking_spots: Optional[int] = None
    area: Optional[float] = None
    amenities: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    video_links: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def status_label(self) -> str:
        """Badge text: the display override, else the localized status."""
        if self.display_status:
            return self.display_status
        return STATUS_LABELS.get(self.status or "", "")

    def to_dict(self) -> dict:
        """Convert record to dictionary for JSON serialization.

        Returns:
            Dictionary representation with datetime converted to ISO format
        """
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'PropertyRecord':
        """Create a PropertyRecord from a store row.

        Unknown columns are ignored and missing ones become None (or empty
        lists for the array columns).

        Args:
            row: Dictionary returned by the store

        Returns:
            PropertyRecord instance
        """
        created_at = row.get('created_at')
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace('Z', '+00:00'))

        def number(key, kind):
            value = row.get(key)
            return kind(value) if value is not None else None

        return cls(
            id=str(row['id']),
            title=row.get('title') or "",
            price=number('price', float),
            description=row.get('description'),
            location=row.get('location'),
            city=row.get('city'),
            region=row.get('region'),
            type=row.get('type'),
            status=row.get('status'),
            display_status=row.get('display_status'),
            bedrooms=number('bedrooms', int),
            suites=number('suites', int),
            bathrooms=number('bathrooms', int),
            parking_spots=number('parking_spots', int),
            area=number('area', float),
            amenities=list(row.get('amenities') or []),
            images=list(row.get('images') or []),
            video_links=list(row.get('video_links') or []),
            created_at=created_at,
        )


@dataclass
class LocationStat:
    """Pre-aggregated property count for one (location, city, region) combination."""
    location: Optional[str]
    city: Optional[str]
    region: Optional[str]
    property_count: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'LocationStat':
        return cls(
            location=row.get('location'),
            city=row.get('city'),
            region=row.get('region'),
            property_count=int(row.get('property_count') or 0),
        )

    @property
    def label(self) -> str:
        """Suggestion label: ``"location - city, region"``.

        Missing parts are dropped along with their separator. Without a
        location the remaining parts are joined with ``" - "`` so that every
        part is searched on its own.
        """
        if not self.location:
            return " - ".join(part for part in (self.city, self.region) if part)
        label = self.location
        if self.city:
            label = f"{label} - {self.city}"
        if self.region:
            label = f"{label}, {self.region}" if self.city else f"{label} - {self.region}"
        return label


@dataclass
class LocationSuggestion:
    """A ranked location offered while the user types."""
    count: int
    location: Optional[str]
    city: Optional[str]
    region: Optional[str]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SearchHistoryEntry:
    """Audit record of a submitted search, written to ``property_search``."""
    location: str
    property_type: str
    status: str
    price_range_min: Optional[float] = None
    price_range_max: Optional[float] = None
    bedrooms: Optional[int] = None
    suites: Optional[int] = None
    parking_spots: Optional[int] = None

    @classmethod
    def from_criteria(cls, criteria: SearchCriteria) -> 'SearchHistoryEntry':
        """Snapshot the criteria at submit time."""
        return cls(
            location=criteria.location,
            property_type=criteria.property_type,
            status=criteria.status,
            price_range_min=criteria.price_min,
            price_range_max=criteria.price_max,
            bedrooms=criteria.bedrooms_min,
            suites=criteria.suites_min,
            parking_spots=criteria.parking_min,
        )

    def to_row(self) -> dict:
        return asdict(self)


@dataclass
class SearchOutcome:
    """Result of a composed property search.

    Attributes:
        records: Matching properties (empty on error or no match)
        error: The store failure, if the query did not complete
    """
    records: List[PropertyRecord] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SearchBroadcast:
    """Payload published to listing displays after each completed search."""
    results: List[PropertyRecord]
    criteria: SearchCriteria

    def to_payload(self) -> dict:
        """Serialize as ``{results, searchParams}``."""
        return {
            "results": [record.to_dict() for record in self.results],
            "searchParams": self.criteria.to_form(),
        }
