"""
Reverse-mode automatic differentiation core.

The core is written against `IBackendTensor` only: graph nodes hold backend
values, local derivative rules call backend operations, and the engine
accumulates backend values keyed by node id.
"""

from ._operation import OpKind, OperationDescriptor
from ._node import GraphNode, record, next_node_id
from ._tape import Tape, build_tape
from ._gradients import Gradients
from ._engine import run_backward
from ._broadcast import sum_to_shape, expand_reduced, normalize_axes
