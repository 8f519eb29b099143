"""Pydantic models shared across the store, the engine and the API.

Split into: ConceptMap documents, specialty records, enrichment payloads,
and final translation results.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ═══════════════ CONCEPTMAP DOCUMENT ═══════════════

class ConceptMapTarget(BaseModel):
    code: str = ""
    display: str = ""
    equivalence: str = ""
    comment: str | None = None


class ConceptMapElement(BaseModel):
    code: str = ""
    display: str = ""
    target: list[ConceptMapTarget] = Field(default_factory=list)


class ConceptMapGroup(BaseModel):
    source: str = ""
    target: str = ""
    element: list[ConceptMapElement] = Field(default_factory=list)


class ConceptMapDocument(BaseModel):
    """A named, versioned code-to-code mapping artifact."""

    model_config = ConfigDict(populate_by_name=True)

    resource_type: str = Field(default="ConceptMap", alias="resourceType")
    id: str | None = None
    url: str = ""
    name: str = ""
    title: str = ""
    version: str | None = None
    status: str = ""
    source_uri: str = Field(default="", alias="sourceUri")
    target_uri: str = Field(default="", alias="targetUri")
    group: list[ConceptMapGroup] = Field(default_factory=list)


# ═══════════════ SPECIALTY RECORDS ═══════════════

class SpecialtyRecord(BaseModel):
    """Common shape of a flat NAMASTE mapping row.

    Field aliases are the column headers of the NAMASTE spreadsheets, which
    is also how rows are keyed in the store and in API responses. Numeric
    cells from spreadsheet imports are read as text.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    namc_id: str | None = Field(default=None, alias="NAMC_ID")
    namc_code: str | None = Field(default=None, alias="NAMC_CODE")
    short_definition: str | None = Field(default=None, alias="Short_definition")
    long_definition: str | None = Field(default=None, alias="Long_definition")

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AyurvedaRecord(SpecialtyRecord):
    namc_term: str | None = Field(default=None, alias="NAMC_term")
    namc_term_diacritical: str | None = Field(default=None, alias="NAMC_term_diacritical")
    namc_term_devanagari: str | None = Field(default=None, alias="NAMC_term_DEVANAGARI")
    name_english: str | None = Field(default=None, alias="Name English")


class SiddhaRecord(SpecialtyRecord):
    namc_term: str | None = Field(default=None, alias="NAMC_TERM")
    tamil_term: str | None = Field(default=None, alias="Tamil_term")
    reference: str | None = Field(default=None, alias="Reference")


# ═══════════════ MATCHES ═══════════════

class RawMatch(BaseModel):
    """One (source element, target) pair found during grouped resolution."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    source_code: str = ""
    source_display: str = ""
    target_code: str = ""
    target_display: str = ""
    equivalence: str = ""
    comment: str | None = None

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.source_code, self.target_code)


class MatchParameter(RawMatch):
    name: Literal["match"] = "match"


class ParametersResource(BaseModel):
    """FHIR-style ``Parameters`` response of the grouped strategy."""

    model_config = ConfigDict(populate_by_name=True)

    resource_type: Literal["Parameters"] = Field(default="Parameters", alias="resourceType")
    parameter: list[MatchParameter] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ═══════════════ ENRICHMENT ═══════════════

class DrugEntry(BaseModel):
    name: str
    form: str = ""
    uses: str = ""
    modern_equivalent: str = ""
    modern_classification: str = ""


class DrugInformation(BaseModel):
    """Validated enrichment payload returned by the knowledge service."""
    condition: str
    drugs: list[DrugEntry] = Field(min_length=1)


class StructuredEnrichment(BaseModel):
    kind: Literal["structured"] = "structured"
    payload: DrugInformation

    @property
    def structured(self) -> bool:
        return True

    def response_data(self) -> Any:
        return self.payload.model_dump()


class UnstructuredEnrichment(BaseModel):
    """Degraded enrichment: the translation still succeeds, with a diagnostic."""
    kind: Literal["unstructured"] = "unstructured"
    diagnostic: str = ""

    @property
    def structured(self) -> bool:
        return False

    def response_data(self) -> Any:
        return [{"message": self.diagnostic}]


EnrichmentResult = Annotated[
    Union[StructuredEnrichment, UnstructuredEnrichment],
    Field(discriminator="kind"),
]


# ═══════════════ FLAT TRANSLATION RESULT ═══════════════

class AyurvedaTranslation(BaseModel):
    system: Literal["AYURVEDA"] = "AYURVEDA"
    record: AyurvedaRecord
    enrichment: EnrichmentResult | None = None

    def to_response(self) -> dict[str, Any]:
        return _flatten(self.system, self.record, self.enrichment)


class SiddhaTranslation(BaseModel):
    system: Literal["SIDDHA"] = "SIDDHA"
    record: SiddhaRecord
    enrichment: EnrichmentResult | None = None

    def to_response(self) -> dict[str, Any]:
        return _flatten(self.system, self.record, self.enrichment)


TranslationResult = Annotated[
    Union[AyurvedaTranslation, SiddhaTranslation],
    Field(discriminator="system"),
]


def _flatten(
    system: str,
    record: SpecialtyRecord,
    enrichment: StructuredEnrichment | UnstructuredEnrichment | None,
) -> dict[str, Any]:
    """Spread record fields next to the system tag and enrichment payload.

    Record models only declare NAMASTE column aliases, so none of them can
    shadow ``system``, ``drug_information`` or ``structured``.
    """
    data: dict[str, Any] = {"system": system}
    data.update(record.to_fields())
    if enrichment is not None:
        data["drug_information"] = enrichment.response_data()
        data["structured"] = enrichment.structured
    return data
