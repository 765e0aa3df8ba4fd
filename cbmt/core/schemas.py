"""
Proof serialization.

A proof's complete state is its index list and its lemma list. ProofModel
carries both, plus the registry name of the merge that recomputes parents,
so a proof can travel as JSON and be rebuilt on the other side.

Lemma encoding depends on the node type:
- bytes -> "0x"-prefixed hex
- int   -> decimal string (u64 values do not survive every JSON parser)
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationInfo, field_validator, model_validator

from cbmt.core.merge import get_merge
from cbmt.core.proof import MerkleProof
from cbmt.crypto import bytes_to_hex, hex_to_bytes
from cbmt.utils.logger import get_logger
from cbmt.utils.validation import validate_hex_string

logger = get_logger("schemas")

SCHEMA_VERSION = "1"


class ProofModel(BaseModel):
    """Wire form of a MerkleProof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    merge: str = Field(..., description="Registry name of the merge", min_length=1)
    encoding: Literal["hex", "int"] = Field(default="hex", description="Lemma encoding")
    indices: List[NonNegativeInt] = Field(..., description="Value-ordered flat indices", min_length=1)
    lemmas: List[str] = Field(default_factory=list, description="Encoded lemma values")

    @field_validator("merge")
    @classmethod
    def _known_merge(cls, value: str) -> str:
        get_merge(value)
        return value.lower()

    @field_validator("lemmas")
    @classmethod
    def _well_formed_lemmas(cls, value: List[str], info: ValidationInfo) -> List[str]:
        encoding = info.data.get("encoding", "hex")
        for lemma in value:
            if encoding == "hex":
                valid, err = validate_hex_string(lemma, "lemma")
                if not valid:
                    raise ValueError(err)
            elif not (lemma.isascii() and lemma.isdigit()):
                raise ValueError(f"lemma {lemma!r} is not a non-negative integer")
        return value

    @model_validator(mode="after")
    def _encoding_matches_merge(self) -> "ProofModel":
        expected = "int" if isinstance(get_merge(self.merge).default(), int) else "hex"
        if self.encoding != expected:
            raise ValueError(f"merge {self.merge!r} needs {expected!r} lemmas, got {self.encoding!r}")
        return self


def encode_value(value: Union[bytes, int]) -> str:
    """Encode a single node value (leaf, lemma or root) for transport."""
    if isinstance(value, (bytes, bytearray)):
        return bytes_to_hex(bytes(value))
    if isinstance(value, int):
        return str(value)
    raise TypeError(f"Cannot encode node value of type {type(value).__name__}")


def decode_value(value: str, encoding: str = "hex") -> Any:
    """Inverse of encode_value()."""
    if encoding == "hex":
        return hex_to_bytes(value)
    return int(value)


def encode_proof(proof: MerkleProof, merge_name: str = "") -> ProofModel:
    """
    Convert a proof to its wire model.

    Args:
        proof: Proof to encode
        merge_name: Registry name of the proof's merge. Defaults to the
            merge's own name.

    Raises:
        TypeError: if the lemmas are neither bytes nor int
        ValueError: if the merge has no registry name
    """
    name = merge_name or proof.merge.name
    sample = proof.lemmas[0] if proof.lemmas else proof.merge.default()
    encoding = "int" if isinstance(sample, int) else "hex"

    return ProofModel(
        merge=name,
        encoding=encoding,
        indices=list(proof.indices),
        lemmas=[encode_value(lemma) for lemma in proof.lemmas],
    )


def decode_proof(model: ProofModel) -> MerkleProof:
    """Rebuild a MerkleProof from its wire model."""
    merge = get_merge(model.merge)
    lemmas = [decode_value(lemma, model.encoding) for lemma in model.lemmas]
    logger.debug(f"Decoded proof: {len(model.indices)} indices, {len(lemmas)} lemmas")
    return MerkleProof(model.indices, lemmas, merge)


def proof_to_json(proof: MerkleProof, merge_name: str = "", indent: Optional[int] = None) -> str:
    """Serialize a proof to a JSON document."""
    return encode_proof(proof, merge_name).model_dump_json(indent=indent)


def proof_from_json(data: Union[str, bytes]) -> MerkleProof:
    """
    Parse a JSON document produced by proof_to_json().

    Raises:
        pydantic.ValidationError: on malformed documents
    """
    return decode_proof(ProofModel.model_validate_json(data))
