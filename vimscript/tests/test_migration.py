"""
Tests for the version 6 to 7 settings migration
"""
import logging
import xml.etree.ElementTree as ET

import pytest

from vimscript.migration import migrate_file, perform_migration

OLD_CONFIG = """\
<application>
  <component name="VimEditorSettings">
    <editor />
  </component>
  <component name="VimHistorySettings">
    <history>
      <history-cmd>
        <entry>qa</entry>
        <entry>w</entry>
      </history-cmd>
      <history-expr />
    </history>
  </component>
  <component name="VimKeySettings">
    <shortcut-conflicts>
      <shortcut-conflict owner="vim">
        <text>ctrl pressed V</text>
      </shortcut-conflict>
    </shortcut-conflicts>
  </component>
  <component name="VimMarksSettings">
    <globalmarks />
    <jumps>
      <jump line="190" column="0" filename="/myFile" />
    </jumps>
  </component>
  <component name="VimRegisterSettings">
    <registers>
      <register name="a" type="4">
        <text encoding="base64">aGVsbG8=</text>
      </register>
    </registers>
  </component>
  <component name="VimSearchSettings">
    <search>
      <last-search encoding="base64">aGVsbG8=</last-search>
      <last-dir>1</last-dir>
    </search>
  </component>
  <component name="VimSettings">
    <state version="6" enabled="true" />
    <notifications>
      <idea-join enabled="false" />
    </notifications>
  </component>
</application>
"""


def component_names(element):
    return [c.get("name") for c in element.findall("component")]


@pytest.fixture
def old_root():
    return ET.fromstring(OLD_CONFIG)


def test_components_are_split(old_root):
    local, shared = perform_migration(old_root)
    assert local.tag == shared.tag == "application"
    assert component_names(local) == [
        "VimHistorySettings", "VimMarksSettings", "VimRegisterSettings", "VimSearchSettings",
    ]
    assert component_names(shared) == ["VimEditorSettings", "VimKeySettings", "VimSettings"]


def test_components_are_copied_unchanged(old_root):
    local, shared = perform_migration(old_root)
    for name in ("VimRegisterSettings", "VimSearchSettings"):
        query = f"component[@name='{name}']"
        assert ET.tostring(local.find(query)) == ET.tostring(old_root.find(query))
    state = shared.find("component[@name='VimSettings']/state")
    assert state.attrib == {"version": "6", "enabled": "true"}


def test_source_tree_is_not_modified(old_root):
    before = ET.tostring(old_root)
    perform_migration(old_root)
    assert ET.tostring(old_root) == before
    assert len(old_root.findall("component")) == 7


def test_unknown_components_are_dropped(caplog):
    root = ET.fromstring(
        '<application><component name="Other"/><component name="VimSettings"/></application>'
    )
    with caplog.at_level(logging.WARNING, logger="vimscript.migration"):
        local, shared = perform_migration(root)
    assert component_names(local) == []
    assert component_names(shared) == ["VimSettings"]
    assert "Other" in caplog.text


def test_migrate_file(tmp_path):
    src = tmp_path / "vim_settings.xml"
    src.write_text(OLD_CONFIG, encoding="utf-8")
    local_path = tmp_path / "vim_settings_local.xml"
    shared_path = tmp_path / "vim_settings_shared.xml"

    migrate_file(str(src), str(local_path), str(shared_path))

    assert local_path.read_text(encoding="utf-8").startswith("<?xml")
    local = ET.parse(local_path).getroot()
    shared = ET.parse(shared_path).getroot()
    assert len(component_names(local)) == 4
    assert component_names(shared) == ["VimEditorSettings", "VimKeySettings", "VimSettings"]
    entries = [e.text for e in local.iter("entry")]
    assert entries == ["qa", "w"]
