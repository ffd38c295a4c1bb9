"""
District table and skill classification.

Each district carries its display data as enum member values; the
language lookup is a read-only mapping.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Optional

logger = logging.getLogger(__name__)

FALLBACK_DISTRICT_NAME = "Unknown District"
FALLBACK_DISTRICT_COLOR = "#888888"


class District(Enum):
    """Thematic city districts: downtown plus ten skill districts."""
    DOWNTOWN = ("downtown", "Downtown", "#c8991d", "The city's tallest towers, home to the top builders")
    FRONTEND = ("frontend", "Frontend Heights", "#2f68c5", "Interfaces, design systems and the web platform")
    BACKEND = ("backend", "Backend Bay", "#bf3636", "Services, APIs and the systems behind them")
    FULLSTACK = ("fullstack", "Fullstack Commons", "#8644c5", "Builders who ship every layer")
    MOBILE = ("mobile", "Mobile Harbor", "#1b9d4b", "Native and cross-platform apps")
    DATA_AI = ("data_ai", "Data & AI Quarter", "#0592aa", "Models, notebooks and pipelines")
    DEVOPS = ("devops", "DevOps Docks", "#c75c12", "Infrastructure, CI and operations")
    SECURITY = ("security", "Security Row", "#b01e1e", "Low-level code, tooling and defense")
    GAMEDEV = ("gamedev", "Gamedev Arcade", "#bd3a7a", "Engines, shaders and games")
    VIBE_CODER = ("vibe_coder", "Vibe Coder Village", "#6f4ac5", "Editors, dotfiles and experiments")
    CREATOR = ("creator", "Creator Corner", "#bb8f06", "Docs, writing and teaching")

    def __init__(self, district_id: str, display_name: str, color: str, description: str):
        self.district_id = district_id
        self.display_name = display_name
        self.color = color
        self.description = description

    @classmethod
    def from_id(cls, district_id: Optional[str]) -> Optional['District']:
        """Look up a district by id; None for unknown ids."""
        if not district_id:
            return None
        return _BY_ID.get(district_id)


_BY_ID = MappingProxyType({d.district_id: d for d in District})

DOWNTOWN_ID = District.DOWNTOWN.district_id
DEFAULT_DISTRICT_ID = District.FULLSTACK.district_id

# Skill districts in canonical cluster order
SKILL_DISTRICTS = tuple(d for d in District if d is not District.DOWNTOWN)

LANGUAGE_DISTRICTS = MappingProxyType({
    # frontend
    "html": District.FRONTEND,
    "css": District.FRONTEND,
    "scss": District.FRONTEND,
    "vue": District.FRONTEND,
    "svelte": District.FRONTEND,
    "astro": District.FRONTEND,
    # backend
    "java": District.BACKEND,
    "go": District.BACKEND,
    "rust": District.BACKEND,
    "c#": District.BACKEND,
    "php": District.BACKEND,
    "ruby": District.BACKEND,
    "elixir": District.BACKEND,
    "scala": District.BACKEND,
    "erlang": District.BACKEND,
    "clojure": District.BACKEND,
    # fullstack
    "javascript": District.FULLSTACK,
    "typescript": District.FULLSTACK,
    # mobile
    "swift": District.MOBILE,
    "kotlin": District.MOBILE,
    "dart": District.MOBILE,
    "objective-c": District.MOBILE,
    # data / ai
    "python": District.DATA_AI,
    "jupyter notebook": District.DATA_AI,
    "r": District.DATA_AI,
    "julia": District.DATA_AI,
    "matlab": District.DATA_AI,
    # devops
    "shell": District.DEVOPS,
    "dockerfile": District.DEVOPS,
    "hcl": District.DEVOPS,
    "nix": District.DEVOPS,
    "powershell": District.DEVOPS,
    "makefile": District.DEVOPS,
    # security
    "c": District.SECURITY,
    "assembly": District.SECURITY,
    "yara": District.SECURITY,
    # gamedev
    "c++": District.GAMEDEV,
    "gdscript": District.GAMEDEV,
    "lua": District.GAMEDEV,
    "shaderlab": District.GAMEDEV,
    "hlsl": District.GAMEDEV,
    "glsl": District.GAMEDEV,
    # vibe coders
    "vim script": District.VIBE_CODER,
    "emacs lisp": District.VIBE_CODER,
    # creators
    "markdown": District.CREATOR,
    "mdx": District.CREATOR,
    "tex": District.CREATOR,
})


def infer_district(signal: Optional[str]) -> str:
    """
    Map a dominant-skill signal (primary language) to a district id.

    Unmapped or missing signals fall back to fullstack.
    """
    if not signal:
        return DEFAULT_DISTRICT_ID
    district = LANGUAGE_DISTRICTS.get(signal.strip().lower())
    return district.district_id if district else DEFAULT_DISTRICT_ID


def resolve_district(record) -> str:
    """
    District for a record outside downtown.

    A pre-assigned district wins, except ``downtown``, which only the
    partitioner hands out.
    """
    if record.district and record.district != DOWNTOWN_ID:
        return record.district
    return infer_district(record.primary_language)


def district_display(district_id: str):
    """(name, color) for a district id, with a generic fallback for unknown ids."""
    district = District.from_id(district_id)
    if district is None:
        return FALLBACK_DISTRICT_NAME, FALLBACK_DISTRICT_COLOR
    return district.display_name, district.color
