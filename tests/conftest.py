# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from genetics_editor.logging.init import reset_logging

# Parameter blocks (columns 37+) of the sample cultivar file.
MIN_PARAMS = " 8.00 0.100  15.0   4.0  10.0  25.0  15.0 0.900  300. 100.0 0.500 0.100  15.0  1.50   5.0  70.0 0.300 0.150"
MAX_PARAMS = "16.00 0.400  30.0  10.0  20.0  40.0  30.0 1.300  450. 200.0 1.000 0.250  30.0  2.50  15.0  85.0 0.500 0.250"
IN_RANGE_PARAMS = "12.33 0.320  21.0   6.0  13.0  32.0  26.0 1.030  375. 180.0 1.000 0.190  23.0  2.20  10.0  77.0 0.405 0.200"
LATE_PARAMS = "17.50 0.320  21.0   6.0  13.0  32.0  26.0 1.030  280. 180.0 1.000 0.190  23.0  2.20  10.0  77.0 0.405 0.200"

MIN_LINE = "999991 MINIMA" + " " * 15 + "." + " 999991 " + MIN_PARAMS
MAX_LINE = "999992 MAXIMA" + " " * 15 + "." + " 999992 " + MAX_PARAMS
# canonical cultivar line: parse + format gives it back unchanged
CULTIVAR_LINE = "IB0001 SOME CULTIVAR" + " " * 8 + "." + " IB0001 " + IN_RANGE_PARAMS
IB0001_LINE = "IB0001 SOME CULTIVAR" + " " * 8 + "." + " SB0001 " + IN_RANGE_PARAMS
# CSDL above and SLAVR below the bounds; ECO# not defined in the ecotype file
IB0002_LINE = "IB0002 LATE CULTIVAR" + " " * 8 + "1" + " SB9999 " + LATE_PARAMS

ECOTYPE_LINE = (
    "SB0001 SUBGROUP 000     00  1 "
    "0.285   3.0   6.0   0.0  5.00  0.35  0.00 35.00  12.0  18.0 0.320  1.00  1.00 0.000  20.0 0.035"
)

CUL_HEADER = [
    "*SOYBEAN CULTIVAR COEFFICIENTS: CRGRO048 MODEL",
    "!",
    "! COEFF   DEFINITIONS",
    "! ========================",
    "! VAR#    Identification code or number for a specific cultivar",
    "! VRNAME  Name of cultivar",
    "! CSDL    Critical Short Day Length below which reproductive development",
    "!         progresses with no daylength effect (for shortday plants) (hour)",
    "! PPSEN   Slope of the relative response of development to photoperiod (1/hour)",
    "!",
    "!Calibration   P P P P P P P G G G G G P G P N N N",
    "@VAR#  VRNAME.......... EXPNO   ECO#  CSDL PPSEN EM-FL FL-SH FL-SD SD-PM FL-LF LFMAX"
    " SLAVR SIZLF  XFRT WTPSD SFDUR SDPDV PODUR THRSH SDPRO SDLIP",
]

ECO_HEADER = [
    "*SOYBEAN ECOTYPE COEFFICIENTS: CRGRO048 MODEL",
    "!",
    "! COEFF   DEFINITIONS",
    "! ECO#    Code for the ecotype to which a cultivar belongs",
    "! MG      Maturity group number",
    "! PL-EM   Time between planting and emergence (thermal days)",
    "!",
    "@ECO#  ECONAME.........  MG  TM THVAR PL-EM EM-V1 V1-JU JU-R0 PM06 PM09 LNHSH R7-R8"
    " FL-VS TRIFL RWDTH RHGHT R1PPO OPTBI SLOBI",
]


def crlf(lines: list[str]) -> bytes:
    return "".join(line + "\r\n" for line in lines).encode("latin-1")


@pytest.fixture(autouse=True)
def _fresh_logging():
    # each test gets a handler bound to its own (captured) stdout
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "GENOTYPE").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def cul_lines() -> list[str]:
    return CUL_HEADER + [MIN_LINE, MAX_LINE, IB0001_LINE, IB0002_LINE]


@pytest.fixture()
def eco_lines() -> list[str]:
    return ECO_HEADER + [ECOTYPE_LINE]


@pytest.fixture()
def sample_config_yaml() -> str:
    return """genotype_directory: ./GENOTYPE
report_directory: ./logs
backup:
  enabled: true
  max_keep: 3
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "editor.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def genotype_files(temp_workdir: Path, cul_lines: list[str], eco_lines: list[str]) -> dict[str, Path]:
    """SBGRO048.CUL / SBGRO048.ECO written the way the crop model ships them (CRLF, Latin-1)."""
    cul = temp_workdir / "GENOTYPE" / "SBGRO048.CUL"
    eco = temp_workdir / "GENOTYPE" / "SBGRO048.ECO"
    cul.write_bytes(crlf(cul_lines))
    eco.write_bytes(crlf(eco_lines))
    return {"cul": cul, "eco": eco}
