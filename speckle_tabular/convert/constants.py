REFERENCED_ID_KEY = "referencedId"
PROPERTIES_KEY = "properties"
CLOSURE_KEY = "__closure"

MAX_RESOLVE_ITERATIONS = 10
DEFAULT_FETCH_WORKERS = 8

# stripped by the object filter, narrower than the download mask
FIELDS_TO_REMOVE = ("__closure", "totalChildrenCount", "renderMaterialProxies")

DOWNLOAD_EXCLUDED_FIELDS = (
    "vertices",
    "faces",
    "colors",
    "__closure",
    "encodedValue",
    "displayValue",
    "renderMaterialProxies",
    "instanceDefinitionProxies",
    "transform",
)

DATA_CHUNK_TYPE = "Speckle.Core.Models.DataChunk"
RAW_ENCODING_TYPE = "Objects.Other.RawEncoding"
DATA_OBJECT_MARKER = "DataObject"

EXCLUDED_PROPERTY_PATHS = (
    "Composite Structure",
    "Material Quantities",
    "Parameters.Type Parameters.Structure",
)

NAME_KEY = "name"
VALUE_KEY = "value"
WRAPPED_VALUE_KEY = "Value"
PATH_SEPARATOR = "."
