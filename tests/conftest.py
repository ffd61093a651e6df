"""Shared fixtures: small Doxygen XML output directories."""

from pathlib import Path
from typing import Dict

import pytest

INDEX_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygenindex xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:noNamespaceSchemaLocation="index.xsd" version="1.9.8" xml:lang="en-US">
  <compound refid="structmy__ns__opts" kind="struct"><name>my_ns_opts</name>
    <member refid="structmy__ns__opts_1a1" kind="variable"><name>size</name></member>
  </compound>
  <compound refid="foo_8h" kind="file"><name>foo.h</name>
    <member refid="foo_8h_1aenum" kind="enum"><name>my_ns_mode</name></member>
    <member refid="foo_8h_1ainit" kind="function"><name>my_ns_init</name></member>
    <member refid="foo_8h_1aother" kind="function"><name>other_thing</name></member>
    <member refid="group__lifecycle_1gastart" kind="function"><name>my_ns_start</name></member>
  </compound>
  <compound refid="foo_8c" kind="file"><name>foo.c</name>
  </compound>
  <compound refid="group__lifecycle" kind="group"><name>lifecycle</name>
    <member refid="group__lifecycle_1gastart" kind="function"><name>my_ns_start</name></member>
  </compound>
</doxygenindex>
"""

HEADER_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8" xml:lang="en-US">
  <compounddef id="foo_8h" kind="file" language="C++">
    <compoundname>foo.h</compoundname>
    <innerclass refid="structmy__ns__opts" prot="public">my_ns_opts</innerclass>
    <sectiondef kind="enum">
      <memberdef kind="enum" id="foo_8h_1aenum" prot="public" static="no" strong="no">
        <type></type>
        <name>my_ns_mode</name>
        <enumvalue id="foo_8h_1aenumfast" prot="public"><name>MY_NS_FAST</name><initializer>= 0</initializer><briefdescription><para>Fast path.</para></briefdescription><detaileddescription></detaileddescription></enumvalue>
        <enumvalue id="foo_8h_1aenumsafe" prot="public"><name>MY_NS_SAFE</name><initializer>= 10</initializer><briefdescription></briefdescription><detaileddescription></detaileddescription></enumvalue>
        <briefdescription><para>Scheduling mode.</para></briefdescription>
        <detaileddescription><para>Selects how work is run.</para></detaileddescription>
        <location file="foo.h" line="5" column="1" bodyfile="foo.h" bodystart="5" bodyend="8"/>
      </memberdef>
    </sectiondef>
    <sectiondef kind="func">
      <memberdef kind="function" id="foo_8h_1ainit" prot="public" static="no" const="no" explicit="no" inline="no" virt="non-virtual">
        <type>int</type>
        <definition>int my_ns_init</definition>
        <argsstring>(void)</argsstring>
        <name>my_ns_init</name>
        <briefdescription><para>Initialize.</para></briefdescription>
        <detaileddescription><para>Starts the runtime.<simplesect kind="return"><para>zero on success</para></simplesect></para></detaileddescription>
        <location file="foo.h" line="12" column="5" declfile="foo.h" declline="12" declcolumn="5"/>
      </memberdef>
      <memberdef kind="function" id="foo_8h_1aother" prot="public" static="no" const="no" explicit="no" inline="no" virt="non-virtual">
        <type>void</type>
        <definition>void other_thing</definition>
        <argsstring>(int x)</argsstring>
        <name>other_thing</name>
        <briefdescription></briefdescription>
        <detaileddescription></detaileddescription>
        <location file="foo.h" line="20" column="6"/>
      </memberdef>
    </sectiondef>
    <briefdescription></briefdescription>
    <detaileddescription><para>See <ref refid="structmy__ns__opts" kindref="compound">my_ns_opts</ref>.</para></detaileddescription>
    <location file="foo.h"/>
  </compounddef>
</doxygen>
"""

SOURCE_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8" xml:lang="en-US">
  <compounddef id="foo_8c" kind="file" language="C++">
    <compoundname>foo.c</compoundname>
    <briefdescription></briefdescription>
    <detaileddescription></detaileddescription>
    <location file="foo.c"/>
  </compounddef>
</doxygen>
"""

STRUCT_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8" xml:lang="en-US">
  <compounddef id="structmy__ns__opts" kind="struct" language="C++" prot="public">
    <compoundname>my_ns_opts</compoundname>
    <includes refid="foo_8h" local="no">foo.h</includes>
    <sectiondef kind="public-attrib">
      <memberdef kind="variable" id="structmy__ns__opts_1a1" prot="public" static="no" mutable="no">
        <type>size_t</type>
        <definition>size_t my_ns_opts::size</definition>
        <argsstring></argsstring>
        <name>size</name>
        <briefdescription><para>Bytes.</para></briefdescription>
        <detaileddescription></detaileddescription>
        <location file="foo.h" line="3" column="12"/>
      </memberdef>
    </sectiondef>
    <briefdescription><para>Options.</para></briefdescription>
    <detaileddescription><para>Runtime options.</para></detaileddescription>
    <location file="foo.h" line="2" column="1" bodyfile="foo.h" bodystart="2" bodyend="4"/>
  </compounddef>
</doxygen>
"""

GROUP_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8" xml:lang="en-US">
  <compounddef id="group__lifecycle" kind="group">
    <compoundname>lifecycle</compoundname>
    <title>Lifecycle</title>
    <sectiondef kind="func">
      <memberdef kind="function" id="group__lifecycle_1gastart" prot="public" static="no" const="no" explicit="no" inline="no" virt="non-virtual">
        <type>struct <ref refid="structmy__ns__opts" kindref="compound">my_ns_opts</ref> *</type>
        <definition>struct my_ns_opts * my_ns_start</definition>
        <argsstring>(const char *name)</argsstring>
        <name>my_ns_start</name>
        <param><type>const char *</type><declname>name</declname></param>
        <briefdescription><para>Start a run.</para></briefdescription>
        <detaileddescription><para>Call <ref refid="foo_8h_1ainit" kindref="member">my_ns_init</ref> first.<parameterlist kind="param"><parameteritem><parameternamelist><parametername>name</parametername></parameternamelist><parameterdescription><para>run name</para></parameterdescription></parameteritem></parameterlist></para></detaileddescription>
        <location file="foo.h" line="8" column="20"/>
      </memberdef>
    </sectiondef>
    <briefdescription></briefdescription>
    <detaileddescription><para>Start and stop.</para></detaileddescription>
  </compounddef>
</doxygen>
"""

MINIMAL_INDEX_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygenindex version="1.9.8">
  <compound refid="foo_8h" kind="file"><name>foo.h</name>
    <member refid="foo_8h_1ainit" kind="function"><name>my_ns_init</name></member>
  </compound>
</doxygenindex>
"""

MINIMAL_HEADER_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="foo_8h" kind="file">
    <compoundname>foo.h</compoundname>
    <sectiondef kind="func">
      <memberdef kind="function" id="foo_8h_1ainit" prot="public" static="no">
        <type>int</type>
        <argsstring>(void)</argsstring>
        <name>my_ns_init</name>
        <briefdescription></briefdescription>
        <detaileddescription></detaileddescription>
        <location file="foo.h" line="12"/>
      </memberdef>
    </sectiondef>
  </compounddef>
</doxygen>
"""

DOXYGEN_FILES = {
    "index.xml": INDEX_XML,
    "foo_8h.xml": HEADER_XML,
    "foo_8c.xml": SOURCE_XML,
    "structmy__ns__opts.xml": STRUCT_XML,
    "group__lifecycle.xml": GROUP_XML,
}


def write_xml_dir(directory: Path, files: Dict[str, str]) -> Path:
    """Write ``files`` (name -> XML text) into ``directory`` and return it."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def doxygen_xml_dir(tmp_path: Path) -> Path:
    """A Doxygen XML directory with a header, a source file, a struct and a group."""
    return write_xml_dir(tmp_path / "xml", DOXYGEN_FILES)


@pytest.fixture
def minimal_xml_dir(tmp_path: Path) -> Path:
    """One header compound declaring one function."""
    return write_xml_dir(
        tmp_path / "xml",
        {"index.xml": MINIMAL_INDEX_XML, "foo_8h.xml": MINIMAL_HEADER_XML},
    )


@pytest.fixture
def doxygen_files() -> Dict[str, str]:
    """The full fixture's files, as a copy that tests may edit."""
    return dict(DOXYGEN_FILES)


@pytest.fixture
def make_xml_dir(tmp_path: Path):
    """Factory writing a custom set of compound files to a fresh directory."""
    counter = [0]

    def _make(files: Dict[str, str]) -> Path:
        counter[0] += 1
        return write_xml_dir(tmp_path / f"xml{counter[0]}", files)

    return _make
