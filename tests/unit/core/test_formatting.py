"""Unit tests for response formatting."""

from jira_mcp.core.formatting import (
    NO_COMMENTS,
    NO_TICKETS,
    SEPARATOR,
    format_comments,
    format_linked_issues,
    format_no_matches,
    format_search_results,
    format_ticket_detail,
    format_ticket_list,
    format_timestamp,
)


# --- Timestamps ---


class TestFormatTimestamp:
    def test_jira_format(self):
        assert format_timestamp("2024-01-15T10:30:00.000+0000") == "2024-01-15 10:30 UTC"

    def test_offset_converted_to_utc(self):
        assert format_timestamp("2024-01-15T10:30:00.000+0200") == "2024-01-15 08:30 UTC"

    def test_iso_without_millis(self):
        assert format_timestamp("2024-01-15T10:30:00+00:00") == "2024-01-15 10:30 UTC"

    def test_missing(self):
        assert format_timestamp(None) == "Unknown date"
        assert format_timestamp("") == "Unknown date"

    def test_unparseable_returned_unchanged(self):
        assert format_timestamp("yesterday") == "yesterday"


# --- Ticket list ---


class TestFormatTicketList:
    def test_one_line_per_issue(self):
        issues = [
            {"key": "A-1", "fields": {"summary": "First", "status": {"name": "To Do"}}},
            {"key": "A-2", "fields": {"summary": "Second", "status": {"name": "Done"}}},
        ]
        assert format_ticket_list(issues) == "A-1: First (To Do)\nA-2: Second (Done)"

    def test_placeholders(self):
        assert format_ticket_list([{"key": "A-3"}]) == "A-3: No summary (Unknown status)"

    def test_missing_key_placeholder(self):
        issues = [{"fields": {"summary": "Orphan"}}]
        assert format_ticket_list(issues) == "Unknown key: Orphan (Unknown status)"

    def test_empty(self):
        assert format_ticket_list([]) == NO_TICKETS
        assert format_ticket_list(None) == NO_TICKETS


# --- Ticket detail ---


class TestFormatTicketDetail:
    def test_full_detail(self, sample_issue):
        text = format_ticket_detail(sample_issue)
        assert text.startswith("Key: PROJ-42\nSummary: Login page times out\n")
        assert "Status: In Progress" in text
        assert "Type: Bug" in text
        assert "Description:\nUsers see a spinner forever.\nHappens on Safari.\n" in text
        assert "Parent: PROJ-1" in text
        assert text.endswith(
            "\nLinked Issues:\n"
            "- [blocks] PROJ-50: Release 2.1\n"
            "- [relates to] OPS-7: CDN config"
        )

    def test_placeholders_for_missing_fields(self):
        text = format_ticket_detail({"key": "X-1", "fields": {}})
        assert text == (
            "Key: X-1\n"
            "Summary: No summary\n"
            "Status: Unknown status\n"
            "Type: Unknown type\n"
            "Description:\nNo description\n"
            "Parent: No parent\n"
            "\nLinked Issues: None"
        )

    def test_single_outward_link(self):
        issue = {
            "key": "X-1",
            "fields": {
                "issuelinks": [
                    {
                        "type": {"name": "Blocks", "outward": "blocks", "inward": "is blocked by"},
                        "outwardIssue": {"key": "X-2", "fields": {"summary": "fix bug"}},
                    }
                ]
            },
        }
        link_lines = [
            line for line in format_ticket_detail(issue).split("\n") if line.startswith("- [")
        ]
        assert link_lines == ["- [blocks] X-2: fix bug"]


class TestFormatLinkedIssues:
    def test_none_marker(self):
        assert format_linked_issues([]) == ["\nLinked Issues: None"]
        assert format_linked_issues(None) == ["\nLinked Issues: None"]

    def test_relation_falls_back_to_type_name(self):
        links = [{"type": {"name": "Cloners"}, "inwardIssue": {"key": "B-1", "fields": {}}}]
        assert format_linked_issues(links)[1] == "- [Cloners] B-1: No summary"

    def test_relation_falls_back_to_related(self):
        links = [{"outwardIssue": {"key": "B-2", "fields": {"summary": "s"}}}]
        assert format_linked_issues(links)[1] == "- [Related] B-2: s"

    def test_malformed_links_are_tolerated(self):
        links = [
            "PROJ-9",
            None,
            {"type": "Blocks", "outwardIssue": {"key": "X-2"}},
            {"type": {"inward": "is cloned by"}, "inwardIssue": {"fields": {"summary": "s"}}},
        ]
        assert format_linked_issues(links) == [
            "\nLinked Issues:",
            "- [Related] X-2: No summary",
            "- [is cloned by] Unknown key: s",
        ]

    def test_string_link_type_in_ticket_detail(self):
        links = [{"type": "Blocks", "outwardIssue": {"key": "X-2"}}]
        issue = {"key": "P-1", "fields": {"issuelinks": links}}
        assert format_ticket_detail(issue).endswith("Linked Issues:\n- [Related] X-2: No summary")

    def test_link_with_both_directions(self):
        links = [
            {
                "type": {"outward": "duplicates", "inward": "is duplicated by"},
                "outwardIssue": {"key": "C-1", "fields": {"summary": "out"}},
                "inwardIssue": {"key": "C-2", "fields": {"summary": "in"}},
            }
        ]
        assert format_linked_issues(links)[1:] == [
            "- [duplicates] C-1: out",
            "- [is duplicated by] C-2: in",
        ]


# --- Comments ---


class TestFormatComments:
    def test_entries(self, sample_comments):
        text = format_comments(sample_comments["comments"])
        assert text == (
            "[2024-01-15 10:30 UTC] Dana Reyes:\nReproduced on staging.\n---"
            "\n\n"
            "[2024-01-16 08:05 UTC] Sam Ito:\nFix is in review.\n---"
        )

    def test_placeholders(self):
        assert format_comments([{}]) == "[Unknown date] Unknown Author:\nNo comment body\n---"

    def test_empty(self):
        assert format_comments([]) == NO_COMMENTS
        assert format_comments(None) == NO_COMMENTS


# --- Search results ---


class TestFormatSearchResults:
    def test_header_and_entries(self, sample_search_response):
        text = format_search_results(
            sample_search_response["issues"], sample_search_response["total"], "spinner"
        )
        assert text.startswith('Found 2 tickets matching "spinner"\n\n')
        assert (
            "[PROJ] PROJ-42: Login page times out\n"
            "Status: In Progress (Updated: 2024-02-01 12:00 UTC)\n"
            "Description:\n"
            "Users see a spinner forever.\n"
            f"{SEPARATOR}\n"
        ) in text
        assert "[OPS] OPS-7: CDN config\n" in text
        assert "Description:\nNo description\n" in text

    def test_singular_header(self):
        issues = [{"key": "A-1", "fields": {}}]
        text = format_search_results(issues, 1, "x")
        assert text.startswith('Found 1 ticket matching "x"\n\n')
        assert "[Unknown project] A-1: No summary" in text
        assert "Updated: Unknown date" in text

    def test_empty_description_gets_placeholder(self):
        issues = [
            {"key": "A-1", "fields": {"description": {"type": "doc", "version": 1, "content": []}}}
        ]
        text = format_search_results(issues, 1, "x")
        assert f"Description:\nNo description\n{SEPARATOR}\n" in text

    def test_total_falls_back_to_issue_count(self):
        issues = [{"key": "A-1", "fields": {}}, {"key": "A-2", "fields": {}}]
        assert format_search_results(issues, None, "x").startswith("Found 2 tickets")

    def test_separator_width(self):
        assert SEPARATOR == "-" * 40

    def test_no_matches(self):
        assert (
            format_no_matches("spinner", ["PROJ", "OPS"])
            == 'No tickets found matching "spinner" in projects: PROJ, OPS'
        )
