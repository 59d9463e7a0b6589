"""Settings migration from version 6 to version 7.

Version 6 kept every setting in one ``<application>`` document made of
``<component name="...">`` sections. Version 7 splits it in two: a local
document for session state (history, marks, registers, search) and a shared
document for user preferences (editor settings, key conflicts, global
state and notifications). The split is a fixed allowlist by component name;
sections are copied untouched.


File: migration.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import copy
import logging
import xml.etree.ElementTree as ET

logger = logging.getLogger(__name__)

LOCAL_COMPONENTS = (
    "VimHistorySettings",
    "VimMarksSettings",
    "VimRegisterSettings",
    "VimSearchSettings",
)

SHARED_COMPONENTS = (
    "VimEditorSettings",
    "VimKeySettings",
    "VimSettings",
)


def perform_migration(root: ET.Element) -> tuple[ET.Element, ET.Element]:
    """
    Split a version 6 settings tree into local and shared trees.

    Args:
        root (Element): The ``<application>`` element of the old document.

    Returns:
        tuple: (local element, shared element), both ``<application>`` roots
        holding deep copies of their components in source order.
    """
    local = ET.Element(root.tag, dict(root.attrib))
    shared = ET.Element(root.tag, dict(root.attrib))
    for component in root.findall("component"):
        name = component.get("name")
        if name in LOCAL_COMPONENTS:
            local.append(copy.deepcopy(component))
        elif name in SHARED_COMPONENTS:
            shared.append(copy.deepcopy(component))
        else:
            logger.warning("Dropping unknown settings component %r", name)
    return local, shared


def migrate_file(path: str, local_path: str, shared_path: str) -> None:
    """
    Read a version 6 settings file and write the two version 7 files.

    Args:
        path (str): Old settings file.
        local_path (str): Destination of the session state document.
        shared_path (str): Destination of the user preferences document.
    """
    root = ET.parse(path).getroot()
    local, shared = perform_migration(root)
    for element, destination in ((local, local_path), (shared, shared_path)):
        ET.indent(element)
        ET.ElementTree(element).write(destination, encoding="utf-8", xml_declaration=True)
    logger.info("Migrated %s into %s and %s", path, local_path, shared_path)
