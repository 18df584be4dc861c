# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTIBILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program. If not, see <http://www.gnu.org/licenses/>.
# ruff: noqa
import logging

__version__ = "3.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Pipeline steps
from .connector.utils.reference_resolver import (
    ReferenceResolver,
    resolve_references,
    resolve_references_async,
)
from .convert.filtering import filter_objects
from .convert.flatten import flatten_properties

# Object source
from .connector.utils.object_source import TransportObjectFetcher, stream_objects

# Operations
from .connector.operations.load_operation import load_model, load_model_batch
from .connector.operations.query_operation import (
    query_objects,
    query_objects_batch,
    query_properties,
    query_properties_batch,
)

from .exceptions import (
    InvalidInputException,
    ObjectFetchException,
    ObjectNotFoundException,
    SpeckleTabularException,
)
from .settings import PipelineSettings
