"""Static tables and defaults shared across alertwatch components."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_URL = "http://localhost:8080"
ALERTS_PATH = "/api/alerts"
HISTORY_PATH = "/api/history"

POLL_INTERVAL = 1.0
DEMO_INTERVAL = 4.0
HISTORY_INTERVAL = 60.0
REQUEST_TIMEOUT = 4.0
HISTORY_LIMIT = 200

ALL_REGIONS = "all"

STATUS_CONNECTING = "connecting"
STATUS_CONNECTED = "connected"
STATUS_ERROR = "error"
STATUS_TEXT = {
    STATUS_CONNECTING: "מתחבר...",
    STATUS_CONNECTED: "מחובר",
    STATUS_ERROR: "שגיאת חיבור",
}

MAP_CENTER = (31.5, 34.9)
MAP_ZOOM = 8
FIT_PADDING = 0.35
FIT_MAX_ZOOM = 12
FOCUS_ZOOM = 14
FOCUS_EPSILON = 0.002


@dataclass(frozen=True)
class ClientSettings:
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = POLL_INTERVAL
    demo_interval: float = DEMO_INTERVAL
    history_interval: float = HISTORY_INTERVAL
    request_timeout: float = REQUEST_TIMEOUT
    region: str = ALL_REGIONS
    sound: bool = True
    notifications: bool = True
    map_output: Path | None = None


@dataclass(frozen=True)
class Category:
    icon: str
    label: str
    color: str


DEFAULT_CATEGORY = Category("⚠️", "התרעה", "#e65100")

CATEGORIES = {
    "1": Category("🚀", "ירי רקטות וטילים", "#d32f2f"),
    "2": Category("🛩️", "חדירת כלי טיס עוין", "#7b1fa2"),
    "3": Category("🌍", "רעידת אדמה", "#795548"),
    "4": Category("☢️", "אירוע רדיולוגי", "#f9a825"),
    "5": Category("🌊", "צונאמי", "#0277bd"),
    "7": Category("☣️", "אירוע חומרים מסוכנים", "#2e7d32"),
    "10": Category("📢", "מבזק", "#455a64"),
    "13": Category("🔫", "חדירת מחבלים", "#c62828"),
}


def category_for(code: str) -> Category:
    return CATEGORIES.get(str(code).strip(), DEFAULT_CATEGORY)


@dataclass(frozen=True)
class Region:
    id: str
    label: str
    cities: frozenset[str]


def _region(region_id: str, label: str, *cities: str) -> Region:
    return Region(region_id, label, frozenset(cities))


REGIONS: dict[str, Region] = {
    r.id: r
    for r in (
        _region(ALL_REGIONS, "כל הארץ"),
        _region("north", "צפון", "קריית שמונה", "מטולה", "נהריה", "שלומי", "צפת", "כרמיאל", "מעלות תרשיחא"),
        _region("haifa", "חיפה והקריות", "חיפה", "קריית אתא", "קריית ביאליק", "קריית מוצקין", "עכו", "טירת כרמל"),
        _region("valleys", "העמקים", "עפולה", "נצרת", "בית שאן", "טבריה", "יקנעם"),
        _region("sharon", "השרון", "נתניה", "הרצליה", "כפר סבא", "רעננה", "חדרה"),
        _region("gush-dan", "גוש דן", "תל אביב - יפו", "רמת גן", "גבעתיים", "בני ברק", "חולון", "בת ים", "פתח תקווה"),
        _region("center", "מרכז", "ראשון לציון", "רחובות", "מודיעין", "לוד", "רמלה", "נס ציונה"),
        _region("jerusalem", "ירושלים", "ירושלים", "בית שמש", "מעלה אדומים", "מבשרת ציון"),
        _region("south", "דרום", "באר שבע", "אשדוד", "אשקלון", "אילת", "דימונה", "קריית גת"),
        _region("otef", "עוטף עזה", "שדרות", "נתיבות", "כפר עזה", "נחל עוז", "ניר עם", "כיסופים"),
    )
}

REGION_ORDER = tuple(REGIONS)

# name -> (lat, lon)
LOCS: dict[str, tuple[float, float]] = {
    "קריית שמונה": (33.2073, 35.5697),
    "מטולה": (33.2800, 35.5786),
    "נהריה": (33.0058, 35.0940),
    "שלומי": (33.0747, 35.1450),
    "צפת": (32.9646, 35.4960),
    "כרמיאל": (32.9190, 35.2950),
    "מעלות תרשיחא": (33.0167, 35.2667),
    "חיפה": (32.7940, 34.9896),
    "קריית אתא": (32.8115, 35.1120),
    "קריית ביאליק": (32.8333, 35.0833),
    "קריית מוצקין": (32.8378, 35.0783),
    "עכו": (32.9281, 35.0818),
    "טירת כרמל": (32.7600, 34.9700),
    "עפולה": (32.6078, 35.2897),
    "נצרת": (32.6996, 35.3035),
    "בית שאן": (32.4970, 35.4960),
    "טבריה": (32.7922, 35.5312),
    "יקנעם": (32.6594, 35.1100),
    "נתניה": (32.3215, 34.8532),
    "הרצליה": (32.1624, 34.8447),
    "כפר סבא": (32.1782, 34.9076),
    "רעננה": (32.1848, 34.8713),
    "חדרה": (32.4340, 34.9196),
    "תל אביב - יפו": (32.0853, 34.7818),
    "רמת גן": (32.0684, 34.8248),
    "גבעתיים": (32.0722, 34.8089),
    "בני ברק": (32.0807, 34.8338),
    "חולון": (32.0114, 34.7748),
    "בת ים": (32.0238, 34.7500),
    "פתח תקווה": (32.0840, 34.8878),
    "ראשון לציון": (31.9730, 34.7925),
    "רחובות": (31.8928, 34.8113),
    "מודיעין": (31.8980, 35.0104),
    "לוד": (31.9510, 34.8881),
    "רמלה": (31.9279, 34.8625),
    "נס ציונה": (31.9293, 34.7987),
    "ירושלים": (31.7683, 35.2137),
    "בית שמש": (31.7470, 34.9881),
    "מעלה אדומים": (31.7770, 35.2980),
    "מבשרת ציון": (31.8000, 35.1500),
    "באר שבע": (31.2520, 34.7915),
    "אשדוד": (31.8044, 34.6553),
    "אשקלון": (31.6688, 34.5743),
    "אילת": (29.5577, 34.9519),
    "דימונה": (31.0700, 35.0300),
    "קריית גת": (31.6100, 34.7642),
    "שדרות": (31.5250, 34.5960),
    "נתיבות": (31.4230, 34.5890),
    "כפר עזה": (31.4836, 34.5336),
    "נחל עוז": (31.4730, 34.4970),
    "ניר עם": (31.5170, 34.5800),
    "כיסופים": (31.3770, 34.3980),
}

SHELTER_NOW = "היכנסו למרחב המוגן ושהו בו 10 דקות"

# Wire-format payloads, replayed in order by the demo simulator.
DEMO_ALERTS: tuple[dict, ...] = (
    {
        "id": "demo-1",
        "cat": "1",
        "title": "ירי רקטות וטילים",
        "data": ["שדרות", "נתיבות", "כפר עזה", "ניר עם", "אשקלון"],
        "desc": SHELTER_NOW,
    },
    {
        "id": "demo-2",
        "cat": "2",
        "title": "חדירת כלי טיס עוין",
        "data": ["קריית שמונה", "מטולה", "שלומי", "נהריה"],
        "desc": SHELTER_NOW,
    },
    {
        "id": "demo-3",
        "cat": "1",
        "title": "ירי רקטות וטילים",
        "data": ["תל אביב - יפו", "רמת גן", "גבעתיים", "חולון", "בת ים", "ראשון לציון"],
        "desc": SHELTER_NOW,
    },
    {
        "id": "demo-4",
        "cat": "13",
        "title": "חדירת מחבלים",
        "data": ["נחל עוז", "כפר עזה"],
        "desc": "היכנסו לבית ונעלו את הדלת",
    },
)
