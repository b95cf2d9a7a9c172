"""
Variant-specific product images.

`variant_images` maps a variant key to an ordered list of image URLs. A key is
either "default" or comma-joined ``axis:value`` pairs sorted by axis name,
e.g. "color:Red,size:Large". Lookups ignore case and pair order, and fall back from
the full selection, to single axes, to "default", and finally to the
product's base images.
"""
import json
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

VariantImages = Dict[str, List[str]]
VariantSelection = Mapping[str, Optional[str]]

DEFAULT_KEY = "default"


def _axis_order(pair: Tuple[str, str]) -> str:
    return pair[0].lower()


class VariantKey:
    """A normalised variant key. Build with `from_selection`, `single`, `default` or `parse`."""

    __slots__ = ("pairs",)

    def __init__(self, pairs: Tuple[Tuple[str, str], ...]):
        self.pairs = pairs

    @classmethod
    def from_selection(cls, selection: VariantSelection) -> "VariantKey":
        return cls(tuple(sorted(active_selections(selection), key=_axis_order)))

    @classmethod
    def single(cls, axis: str, value: str) -> "VariantKey":
        return cls(((axis, value),))

    @classmethod
    def default(cls) -> "VariantKey":
        return cls(())

    @classmethod
    def parse(cls, raw: str) -> Optional["VariantKey"]:
        """Read a stored key; None if it is not "default" or a list of axis:value pairs."""
        raw = raw.strip()
        if raw.lower() == DEFAULT_KEY:
            return cls.default()
        pairs = []
        for part in raw.split(","):
            axis, sep, value = part.partition(":")
            if not sep or not axis.strip() or not value.strip():
                return None
            pairs.append((axis.strip(), value.strip()))
        return cls(tuple(sorted(pairs, key=_axis_order)))

    @property
    def is_default(self) -> bool:
        return not self.pairs

    def lookup_form(self) -> str:
        """Case-folded, axis-sorted form used for matching."""
        if self.is_default:
            return DEFAULT_KEY
        pairs = sorted((axis.lower(), value.lower()) for axis, value in self.pairs)
        return ",".join(f"{axis}:{value}" for axis, value in pairs)

    def __str__(self) -> str:
        if self.is_default:
            return DEFAULT_KEY
        return ",".join(f"{axis}:{value}" for axis, value in self.pairs)

    def __repr__(self) -> str:
        return f"VariantKey({str(self)!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, VariantKey) and self.lookup_form() == other.lookup_form()

    def __hash__(self) -> int:
        return hash(self.lookup_form())


def normalize_key(raw: str) -> str:
    """Matching form of a stored key; unparseable keys are only case-folded."""
    key = VariantKey.parse(raw)
    return key.lookup_form() if key else raw.strip().lower()


def active_selections(selection: Optional[VariantSelection]) -> List[Tuple[str, str]]:
    """Selected (axis, value) pairs in insertion order, without empty values."""
    if not selection:
        return []
    return [(axis, value) for axis, value in selection.items() if value]


def generate_key(selection: VariantSelection) -> str:
    """Key under which images for `selection` are stored; independent of dict order."""
    return str(VariantKey.from_selection(selection))


def candidate_keys(selection: Optional[VariantSelection]) -> List[VariantKey]:
    """Lookup order: full combination, each single axis (selection order), then default."""
    selected = active_selections(selection)
    keys: List[VariantKey] = []
    if selected:
        keys.append(VariantKey.from_selection(dict(selected)))
    keys.extend(VariantKey.single(axis, value) for axis, value in selected)
    keys.append(VariantKey.default())
    return keys


def resolve(
    variant_images: Optional[VariantImages],
    base_images: Optional[Iterable[str]],
    selection: Optional[VariantSelection],
) -> List[str]:
    """Most specific non-empty image list for a selection; base images when nothing matches."""
    fallback = list(base_images or [])
    if not variant_images:
        return fallback

    by_key: VariantImages = {}
    for key, images in variant_images.items():
        images = _image_list(images)
        if images:
            by_key.setdefault(normalize_key(key), images)

    for key in candidate_keys(selection):
        images = by_key.get(key.lookup_form())
        if images:
            return list(images)

    return fallback


def _image_list(images) -> List[str]:
    # A bare URL is a one-image list; anything else that is not a list is empty
    if isinstance(images, str):
        return [images] if images.strip() else []
    if isinstance(images, (list, tuple)):
        return [url for url in images if isinstance(url, str)]
    return []


def parse_variant_images(data) -> VariantImages:
    """Accept the stored column as a JSON string or a mapping; anything else is empty."""
    if not data:
        return {}
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            return {}
    if isinstance(data, Mapping):
        return {str(key): _image_list(images) for key, images in data.items()}
    return {}


def set_variant_images(
    variant_images: Optional[VariantImages],
    selection: VariantSelection,
    images: List[str],
) -> VariantImages:
    """Return a copy with `images` stored under the selection's key; an empty list removes the key."""
    key = VariantKey.from_selection(selection)
    updated = {
        existing: urls
        for existing, urls in (variant_images or {}).items()
        if normalize_key(existing) != key.lookup_form()
    }
    if images:
        updated[str(key)] = list(images)
    return updated
