from types import MappingProxyType
from typing import Dict, Optional, Tuple
import threading

from .core.node import ConstantNode

# 50 significant digits, matching the decimal evaluation precision
PI_DIGITS = "3.1415926535897932384626433832795028841971693993751"
E_DIGITS = "2.7182818284590452353602874713526624977572470937000"


class ConstantTable:
  """Read-only table of the named constant singletons"""

  def __init__(self):
    nodes: Dict[str, ConstantNode] = {
      'pi': ConstantNode('pi', PI_DIGITS),
      'e': ConstantNode('e', E_DIGITS),
    }
    self._nodes = MappingProxyType(nodes)

  def get(self, name: str) -> Optional[ConstantNode]:
    return self._nodes.get(name)

  def __contains__(self, name: str) -> bool:
    return name in self._nodes

  def names(self) -> Tuple[str, ...]:
    return tuple(self._nodes)

  @property
  def pi(self) -> ConstantNode:
    return self._nodes['pi']

  @property
  def e(self) -> ConstantNode:
    return self._nodes['e']


# Global instance, created on first use
_CONSTANT_TABLE: Optional[ConstantTable] = None
_INITIALIZED = False
_TABLE_LOCK = threading.Lock()


def get_constant_table() -> ConstantTable:
  """Get the global constant table, building it once under the lock"""
  global _CONSTANT_TABLE, _INITIALIZED

  # Fast path - no locking needed once initialized
  if _INITIALIZED and _CONSTANT_TABLE is not None:
    return _CONSTANT_TABLE

  with _TABLE_LOCK:
    if not _INITIALIZED or _CONSTANT_TABLE is None:
      _CONSTANT_TABLE = ConstantTable()
      _INITIALIZED = True

  return _CONSTANT_TABLE


def pi() -> ConstantNode:
  return get_constant_table().pi


def e() -> ConstantNode:
  return get_constant_table().e
