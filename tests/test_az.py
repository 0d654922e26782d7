import gzip
import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from search_gwas.adapters import AzDatasetAdapter  # noqa: E402
from search_gwas.errors import ParseError  # noqa: E402
from search_gwas.models import AzAssociation  # noqa: E402
from search_gwas.query import query_az  # noqa: E402
from search_gwas.report import ReportShape  # noqa: E402


def _write_gz(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with gzip.open(path, "wt", encoding="utf-8") as handle:
        handle.write(text)


@pytest.fixture
def az_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "az470k-proteomics"
    _write_gz(
        directory / "binary.csv.gz",
        "trait,gene,p_value\n"
        "Asthma,il33,1e-12\n"
        "asthma,GSDMB,4e-8\n"
        "Asthma,TSLP,0.01\n"
        "asthma,,1e-20\n"
        "asthma,ORMDL3,NA\n",
    )
    _write_gz(
        directory / "quantitative.csv.gz",
        "Phenotype,Gene,pValue,extra\n"
        "LDL cholesterol,apoe,1e-50,x\n"
        "Asthma,IL33,2e-9,y\n",
    )
    return directory


def test_az_adapter_reads_present_files_in_order(az_dir: Path) -> None:
    adapter = AzDatasetAdapter(az_dir)

    assert [path.name for path in adapter.available_paths()] == [
        "binary.csv.gz",
        "quantitative.csv.gz",
    ]
    assert adapter.read() == [
        AzAssociation("asthma", "IL33", 1e-12),
        AzAssociation("asthma", "GSDMB", 4e-8),
        AzAssociation("asthma", "TSLP", 0.01),
        AzAssociation("ldl cholesterol", "APOE", 1e-50),
        AzAssociation("asthma", "IL33", 2e-9),
    ]


def test_az_adapter_with_no_files_is_empty(tmp_path: Path) -> None:
    assert AzDatasetAdapter(tmp_path / "missing").read() == []


def test_az_adapter_rejects_unknown_headers(tmp_path: Path) -> None:
    _write_gz(tmp_path / "proteomics.csv.gz", "name,symbol,score\nasthma,IL33,1e-9\n")

    with pytest.raises(ParseError, match="p_value|trait"):
        AzDatasetAdapter(tmp_path).read()


def test_query_az_lists_significant_genes(az_dir: Path) -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None)

    report = query_az("asthma", [], False, False, az_dir=az_dir, console=console)

    assert report.shape is ReportShape.GENE_LIST
    assert report.genes == ["IL33", "GSDMB"]
    assert buffer.getvalue().splitlines() == ["asthma:", "  IL33", "  GSDMB"]


def test_query_az_per_gene_rows(az_dir: Path) -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None)

    report = query_az("asthma", ["IL33", "TSLP"], True, True, az_dir=az_dir, console=console)

    assert report.per_gene == [
        ("IL33", [("asthma", "1e-12"), ("asthma", "2e-9")]),
        ("TSLP", []),
    ]
    assert buffer.getvalue().splitlines() == [
        "asthma:",
        "  IL33:",
        "    Trait,P-value",
        "    asthma,1e-12",
        "    asthma,2e-9",
        "  TSLP:",
    ]


def test_query_az_requires_a_source() -> None:
    with pytest.raises(ValueError):
        query_az("asthma", [], False, False)
