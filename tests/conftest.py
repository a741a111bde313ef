from pathlib import Path
from typing import Dict

import pytest


VESSEL_CSV = (
    "Name,Type,Min,Max,Required,Repeat,Notes\n"
    "Hull Number,number,1,10,Y,,Registry number\n"
    "Vessel Name,text,,64,,,\n"
    "Colour,color,,,,,\n"
    "Propulsion,mode,,,,,\n"
    "Owner,person,,,,,\n"
)

MODE_CSV = (
    "Name,Type,Min,Max,Required,Notes\n"
    "Engine,text,2,40,Y,Main engine\n"
    "Crew,crew,,,,\n"
    "Fuel,fuel,,,,\n"
    "Speed,number,,,Y,\n"
)

CREW_CSV = (
    "Name,Type,Required\n"
    "Captain,text,Y\n"
    "Size,number,\n"
)

COLOR_CSV = "value\nRed\n\nBlue\n"


def write_files(root: Path, files: Dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Write ``{relative_path: content}`` under a fresh directory and return it."""
    counter = iter(range(1000))

    def _make(files: Dict[str, str]) -> Path:
        return write_files(tmp_path / f"tree{next(counter)}", files)

    return _make


@pytest.fixture
def schema_tree(make_tree):
    return make_tree(
        {
            "Vessel.csv": VESSEL_CSV,
            "Types/Mode.csv": MODE_CSV,
            "Types/Crew.csv": CREW_CSV,
            "Catalog/Color.csv": COLOR_CSV,
        }
    )


@pytest.fixture
def cyclic_tree(make_tree):
    return make_tree(
        {
            "Plain.csv": "Name,Type\nLabel,text\n",
            "Types/Mode.csv": "Name,Type\nCrew,crew\n",
            "Types/Crew.csv": "Name,Type\nMode,mode\n",
        }
    )
