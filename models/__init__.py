from .header_mapping import HeaderMapping, MappingSuggestion
from .lookup_result import LookupResult
from .person_record import PersonRecord, ExtractedPerson, ExtractedPeople
from .extraction_outcome import ExtractionOutcome
from .inference_result import InferenceResult

__all__ = [
    "HeaderMapping",
    "MappingSuggestion",
    "LookupResult",
    "PersonRecord",
    "ExtractedPerson",
    "ExtractedPeople",
    "ExtractionOutcome",
    "InferenceResult",
]
