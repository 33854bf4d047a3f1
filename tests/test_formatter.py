from tasklog_summarizer.formatting.summary_formatter import format_summary_groups, sort_summary_groups


def sample_groups():
    return {
        'Meetings': ['standup'],
        'sprint 11': ['deploy'],
        'General Tasks': ['docs'],
        'Background Task': ['migrations'],
        'Checkout': ['page'],
        'Project Tasks': ['roadmap'],
    }


def test_unlisted_titles_come_first_then_precedence_order():
    titles = [group.title for group in format_summary_groups(sample_groups())]
    assert titles == ['Checkout', 'sprint 11', 'Background Task', 'Project Tasks', 'Meetings', 'General Tasks']


def test_empty_label_becomes_general_tasks():
    groups = format_summary_groups({'': ['misc']})
    assert groups[0].title == 'General Tasks'
    assert groups[0].tasks == ['misc']


def test_case_only_differences_have_a_fixed_order():
    assert [g.title for g in format_summary_groups({'x': ['1'], 'X': ['2']})] == ['X', 'x']
    assert [g.title for g in format_summary_groups({'X': ['2'], 'x': ['1']})] == ['X', 'x']


def test_formatting_is_deterministic_and_idempotent():
    first = format_summary_groups(sample_groups())
    second = format_summary_groups(dict(reversed(list(sample_groups().items()))))
    assert [g.to_dict() for g in first] == [g.to_dict() for g in second]
    assert [g.to_dict() for g in sort_summary_groups(first)] == [g.to_dict() for g in first]
