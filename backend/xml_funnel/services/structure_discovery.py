"""
Record structure discovery

Finds the repeating element pattern that represents one logical record
without any prior knowledge of element names:

- every element owning at least one child element gets a signature: its
  immediate child tag names, sorted and comma-joined
- elements are grouped by signature (child shape, not their own tag)
- the largest group wins; ties go to the group seen first in document order
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from funnel_shared.exceptions import NoRepeatingStructureError
from funnel_shared.models.xml_dataset import StructureCandidate
from funnel_shared.utils.app_logger import get_logger

from xml_funnel.services.document_loader import XmlNode

logger = get_logger(__name__)


@dataclass(frozen=True)
class RecordStructure:
    """Winning signature group of one document."""

    root_element: str
    signature: str
    members: Tuple[XmlNode, ...]
    candidates: Tuple[StructureCandidate, ...] = ()

    @property
    def record_element(self) -> str:
        return self.members[0].tag

    @property
    def total_records(self) -> int:
        return len(self.members)


class RecordStructureDiscovery:
    """Signature grouping over a parsed document tree."""

    @staticmethod
    def compute_signature(node: XmlNode) -> str:
        return ",".join(sorted(node.child_tags()))

    @classmethod
    def group_by_signature(cls, root: XmlNode) -> Dict[str, List[XmlNode]]:
        """Signature -> members, in order of first appearance."""
        groups: Dict[str, List[XmlNode]] = {}
        for node in root.iter():
            if not node.has_children:
                continue
            groups.setdefault(cls.compute_signature(node), []).append(node)
        return groups

    @classmethod
    def discover(cls, root: XmlNode) -> RecordStructure:
        """
        Pick the record group of a document.

        Raises:
            NoRepeatingStructureError: no element has a child element
        """
        groups = cls.group_by_signature(root)

        winner = ""
        max_count = 0
        for signature, members in groups.items():
            # strict comparison keeps the first group on ties
            if len(members) > max_count:
                max_count = len(members)
                winner = signature

        if max_count == 0:
            raise NoRepeatingStructureError(root_element=root.tag)

        candidates = tuple(
            StructureCandidate(
                signature=signature,
                element_names=list(dict.fromkeys(m.tag for m in members)),
                count=len(members),
            )
            for signature, members in groups.items()
        )
        structure = RecordStructure(
            root_element=root.tag,
            signature=winner,
            members=tuple(groups[winner]),
            candidates=candidates,
        )
        logger.debug(
            f"Discovered record structure '{winner}' ({max_count} members) "
            f"among {len(groups)} candidate groups"
        )
        return structure
