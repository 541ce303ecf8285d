"""KBaseGenomes records: Genome -> Feature -> ProteinFamily."""
from __future__ import annotations

from typing import Any, ClassVar

from fbaservices.records.base import BaseObject, attribute, link, subobject


class ProteinFamily(BaseObject):
    object_type: ClassVar[str] = "KBaseGenomes.ProteinFamily"
    module: ClassVar[str] = "KBaseGenomes"
    class_name: ClassVar[str] = "ProteinFamily"
    collection: ClassVar[str] = "protein_families"

    id: str = attribute(print_order=0)
    subject_db: str | None = attribute(None, print_order=1)
    release_version: str | None = attribute(None)
    subject_description: str | None = attribute(None, print_order=2)
    query_begin: int | None = attribute(None)
    query_end: int | None = attribute(None)
    subject_begin: int | None = attribute(None)
    subject_end: int | None = attribute(None)
    score: float | None = attribute(None)
    evalue: float | None = attribute(None)


class Feature(BaseObject):
    """A genome feature (gene, RNA, ...) as stored in a KBaseGenomes.Genome."""

    object_type: ClassVar[str] = "KBaseGenomes.Feature"
    module: ClassVar[str] = "KBaseGenomes"
    class_name: ClassVar[str] = "Feature"
    collection: ClassVar[str] = "features"

    function: str | None = attribute(None, print_order=2)
    subsystems: list[str] = attribute(default_factory=list)
    atomic_regulons: list[Any] = attribute(default_factory=list)
    coexpressed_fids: list[Any] = attribute(default_factory=list)
    dna_sequence: str | None = attribute(None)
    protein_translation: str | None = attribute(None)
    co_occurring_fids: list[Any] = attribute(default_factory=list)
    regulon_data: list[Any] = attribute(default_factory=list)
    feature_creation_event: str = attribute(print_order=0)
    publications: list[Any] = attribute(default_factory=list)
    id: str = attribute(print_order=0)
    # [contig_id, begin, strand, length] tuples
    location: list[list[Any]] = attribute(default_factory=list)
    subsystem_data: list[Any] = attribute(default_factory=list)
    annotations: list[Any] = attribute(default_factory=list)
    dna_sequence_length: int | None = attribute(None)
    orthologs: list[Any] = attribute(default_factory=list)
    protein_translation_length: int | None = attribute(None)
    aliases: list[str] = attribute(default_factory=list)
    type: str = attribute("peg", print_order=1)
    md5: str | None = attribute(None)

    protein_families: list[ProteinFamily] = subobject()


class Genome(BaseObject):
    object_type: ClassVar[str] = "KBaseGenomes.Genome"
    module: ClassVar[str] = "KBaseGenomes"
    class_name: ClassVar[str] = "Genome"
    top: ClassVar[bool] = True

    id: str = attribute(print_order=0)
    scientific_name: str = attribute(print_order=1)
    domain: str = attribute(print_order=2)
    genetic_code: int = attribute(11, print_order=5)
    dna_size: int | None = attribute(None)
    num_contigs: int | None = attribute(None)
    contig_lengths: list[int] = attribute(default_factory=list)
    contig_ids: list[str] = attribute(default_factory=list)
    source: str | None = attribute(None, print_order=3)
    source_id: str | None = attribute(None, print_order=4)
    md5: str | None = attribute(None)
    taxonomy: str | None = attribute(None)
    gc_content: float | None = attribute(None)
    complete: int | None = attribute(None)
    publications: list[Any] = attribute(default_factory=list)
    contigs: list[Any] = attribute(default_factory=list)
    close_genomes: list[Any] = attribute(default_factory=list)
    analysis_events: list[Any] = attribute(default_factory=list)
    contigset_ref: str | None = link()
    proteinset_ref: str | None = link()
    transcriptset_ref: str | None = link()

    features: list[Feature] = subobject()

    def get_feature(self, feature_id: str) -> Feature | None:
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None


__all__ = ["Feature", "Genome", "ProteinFamily"]
