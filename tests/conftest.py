import sys
from pathlib import Path

import pytest
import requests
from requests.structures import CaseInsensitiveDict

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from search_gwas.config import EFO_URL, GWAS_CATALOG_URL  # noqa: E402


GWAS_HEADER = "\t".join(
    [
        "DATE ADDED TO CATALOG",
        "PUBMEDID",
        "LINK",
        "STUDY ACCESSION",
        "MAPPED_GENE",
        "P-VALUE",
        "MAPPED_TRAIT_URI",
    ]
)


def gwas_row(
    *,
    pubmed: str,
    accession: str,
    gene: str,
    p_value: str,
    traits: str,
) -> str:
    return "\t".join(
        [
            "2020-01-01",
            pubmed,
            f"www.ncbi.nlm.nih.gov/pubmed/{pubmed}",
            accession,
            gene,
            p_value,
            traits,
        ]
    )


GWAS_TSV = "\n".join(
    [
        GWAS_HEADER,
        gwas_row(
            pubmed="100",
            accession="GCST000001",
            gene="BRCA1",
            p_value="1E-10",
            traits="http://www.ebi.ac.uk/efo/EFO_0000020, http://purl.obolibrary.org/obo/MONDO_0000001",
        ),
        gwas_row(
            pubmed="100",
            accession="GCST000001",
            gene="BRCA1",
            p_value="1E-10",
            traits="http://www.ebi.ac.uk/efo/EFO_0000020, http://purl.obolibrary.org/obo/MONDO_0000001",
        ),
        gwas_row(
            pubmed="200",
            accession="GCST000002",
            gene="tp53",
            p_value="1E-3",
            traits="http://www.ebi.ac.uk/efo/EFO_0000060, http://www.ebi.ac.uk/efo/EFO_0000020",
        ),
        gwas_row(
            pubmed="300",
            accession="GCST000003",
            gene="  ",
            p_value="2E-9",
            traits="http://www.ebi.ac.uk/efo/EFO_0000020",
        ),
        gwas_row(
            pubmed="400",
            accession="GCST000004",
            gene="APOE - APOC1",
            p_value="3E-12",
            traits="http://www.ebi.ac.uk/efo/EFO_0000030",
        ),
    ]
) + "\n"


EFO_OWL = """<?xml version="1.0"?>
<rdf:RDF xmlns="http://www.ebi.ac.uk/efo/efo.owl#"
     xmlns:owl="http://www.w3.org/2002/07/owl#"
     xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
     xmlns:rdfs="http://www.w3.org/2000/01/rdf-schema#"
     xmlns:oboInOwl="http://www.geneontology.org/formats/oboInOwl#">
    <owl:Class rdf:about="http://www.ebi.ac.uk/efo/EFO_0000020">
        <rdfs:subClassOf rdf:resource="http://www.ebi.ac.uk/efo/EFO_0000010"/>
        <rdfs:label>breast carcinoma</rdfs:label>
        <oboInOwl:hasExactSynonym>Breast Cancer</oboInOwl:hasExactSynonym>
        <oboInOwl:hasExactSynonym>breast cancer </oboInOwl:hasExactSynonym>
        <oboInOwl:hasExactSynonym>mammary carcinoma</oboInOwl:hasExactSynonym>
    </owl:Class>
    <owl:Class rdf:about="http://www.ebi.ac.uk/efo/EFO_0000010">
        <rdfs:label> cancer </rdfs:label>
    </owl:Class>
    <owl:Class rdf:about="http://www.ebi.ac.uk/efo/EFO_0000030">
        <rdfs:subClassOf rdf:resource="http://purl.obolibrary.org/obo/BFO_0000001"/>
        <rdfs:label>Alzheimer disease</rdfs:label>
    </owl:Class>
    <owl:Class rdf:about="http://www.ebi.ac.uk/efo/EFO_0000040">
        <rdfs:subClassOf rdf:resource="http://www.ebi.ac.uk/efo/EFO_9999999"/>
        <rdfs:label>orphan trait</rdfs:label>
    </owl:Class>
    <owl:Class rdf:about="http://www.ebi.ac.uk/efo/EFO_0000050">
        <rdfs:subClassOf rdf:resource="http://www.ebi.ac.uk/efo/EFO_0000010"/>
    </owl:Class>
    <owl:Class rdf:about="http://purl.obolibrary.org/obo/MONDO_0000001">
        <rdfs:label>mondo disease</rdfs:label>
    </owl:Class>
    <owl:Class>
        <owl:unionOf rdf:parseType="Collection"/>
    </owl:Class>
    <owl:Class rdf:about="http://www.ebi.ac.uk/efo/EFO_0000060">
        <rdfs:subClassOf>
            <owl:Restriction/>
        </rdfs:subClassOf>
        <rdfs:subClassOf rdf:resource="http://www.ebi.ac.uk/efo/EFO_0000020"/>
        <rdfs:label>triple negative breast carcinoma</rdfs:label>
    </owl:Class>
</rdf:RDF>
"""


class FakeResponse:
    def __init__(
        self,
        *,
        content: bytes = b"",
        headers: dict[str, str] | None = None,
        status_code: int = 200,
    ) -> None:
        self.content = content
        self.headers = CaseInsensitiveDict(headers or {})
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Records every request; unknown routes fail like a refused connection."""

    def __init__(self, routes: dict[tuple[str, str], FakeResponse] | None = None) -> None:
        self.routes = routes or {}
        self.calls: list[tuple[str, str, float | None]] = []

    def _respond(self, method: str, url: str, timeout: float | None) -> FakeResponse:
        self.calls.append((method, url, timeout))
        if (method, url) not in self.routes:
            raise requests.ConnectionError(f"no route for {method} {url}")
        return self.routes[(method, url)]

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        return self._respond("GET", url, timeout)

    def head(
        self,
        url: str,
        timeout: float | None = None,
        allow_redirects: bool = False,
    ) -> FakeResponse:
        return self._respond("HEAD", url, timeout)

    def close(self) -> None:
        pass


def remote_routes(
    *,
    gwas_tsv: str = GWAS_TSV,
    efo_owl: str = EFO_OWL,
    gwas_release: str = "2024-01-19",
    efo_last_modified: str = "Fri, 19 Jan 2024 10:00:00 GMT",
) -> dict[tuple[str, str], FakeResponse]:
    disposition = (
        "attachment; filename="
        f"gwas-catalog-download-associations-alt-full_r{gwas_release}.tsv"
    )
    return {
        ("GET", GWAS_CATALOG_URL): FakeResponse(content=gwas_tsv.encode()),
        ("HEAD", GWAS_CATALOG_URL): FakeResponse(headers={"Content-Disposition": disposition}),
        ("GET", EFO_URL): FakeResponse(content=efo_owl.encode()),
        ("HEAD", EFO_URL): FakeResponse(headers={"Last-Modified": efo_last_modified}),
    }


@pytest.fixture
def gwas_tsv() -> str:
    return GWAS_TSV


@pytest.fixture
def efo_owl() -> str:
    return EFO_OWL
