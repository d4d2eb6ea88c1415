"""Sample XML documents used across the test suite."""

PEOPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<database>
    <table name="People">
        <row>
            <cell name="Name">Ann</cell>
            <cell name="Age">30</cell>
        </row>
    </table>
</database>
"""

MULTI_TABLE_XML = """<inventory>
    <!-- stock levels -->
    <table name="Parts">
        <row>
            <cell name="Id">1</cell>
            <cell name="Label">Bolt &amp; nut</cell>
            <cell>steel</cell>
        </row>
        <row>
            <cell name="Id">2</cell>
        </row>
        <row>
            <cell name="Id">3</cell>
            <cell name="Label">Washer</cell>
            <cell>zinc</cell>
            <cell name="Extra">ignored later</cell>
        </row>
    </table>
    <table name="">
        <row><cell name="Hidden">x</cell></row>
    </table>
    <table>
        <row><cell name="Hidden">y</cell></row>
    </table>
    <table name="Empty"/>
    <table name="Parts">
        <row><cell name="Shadow">second</cell></row>
    </table>
    <table name="Places">
        <row>
            <cell name="City">Zürich</cell>
            <cell name="Note">  padded  </cell>
            <cell name="Blank"></cell>
        </row>
    </table>
</inventory>
"""

NO_TABLES_XML = """<settings>
    <option name="colour">blue</option>
</settings>
"""
