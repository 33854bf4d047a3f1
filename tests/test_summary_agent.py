import asyncio

from tasklog_summarizer.agents.summary_agent import ERROR_STATUS, TaskSummaryAgent
from tasklog_summarizer.models.services import SentenceValidityService, TitleClassificationService

from conftest import FakeEmbedder, FakeSentenceValidator, FakeTitleClassifier, make_task


def sample_tasks():
    return [
        make_task('1', 'Sprint 10', 'Done -> fix login bug\n- review PR for payments'),
        make_task('2', 'Sprint 10', 'write release notes, and changelog'),
        make_task('3', 'Sprint 10', 'fix the login bug'),
        make_task('4', 'Sprint 10', 'https://example.com/pr/12\ncheck API links'),
        make_task('5', 'Sprint 10', 'deploy staging build'),
        make_task('6', 'Sprint 11', 'implement checkout page'),
        make_task('7', 'Break', 'coffee'),
        make_task('8', 'English class', 'grammar lesson'),
        make_task('9', '', 'update onboarding docs'),
    ]


def make_agent(settings, embedder=None, **kwargs):
    embedder = embedder or FakeEmbedder(same_as={
        'fix the login bug': 'fix login bug',
        'Sprint 11': 'Sprint 10',
    })
    validator = kwargs.pop('sentence_validator', FakeSentenceValidator(invalid={'and changelog'}))
    return TaskSummaryAgent(settings, embedder=embedder, sentence_validator=validator, **kwargs)


def summarize(agent, tasks, **kwargs):
    statuses = []
    groups = asyncio.run(agent.summarize(tasks, on_progress=statuses.append, **kwargs))
    return [group.to_dict() for group in groups], statuses


def test_end_to_end_summary(settings):
    groups, statuses = summarize(make_agent(settings), sample_tasks())

    assert groups == [
        {'title': 'Sprint 10', 'tasks': [
            'fix login bug',
            'review pull request for payments',
            'write release notes, and changelog',
            'check API links',
            'deploy staging build',
        ]},
        {'title': 'Sprint 11', 'tasks': ['implement checkout page']},
        {'title': 'General Tasks', 'tasks': ['update onboarding docs']},
    ]
    assert statuses[0] == 'initializing (0%)'
    assert statuses[-1] == 'summary complete (100%)'


def test_every_stage_is_reported_once(settings):
    _, statuses = summarize(make_agent(settings), sample_tasks())
    assert len(statuses) == len(set(statuses)) == 9


def test_models_are_loaded_before_use(settings):
    embedder = FakeEmbedder()
    validator = FakeSentenceValidator()
    agent = make_agent(settings, embedder=embedder, sentence_validator=validator)
    asyncio.run(agent.summarize(sample_tasks()))
    assert embedder.load_calls == 1
    assert validator.load_calls == 1


def test_tasks_are_not_modified(settings):
    tasks = sample_tasks()
    before = [task.to_dict() for task in tasks]
    summarize(make_agent(settings), tasks)
    assert [task.to_dict() for task in tasks] == before


def test_empty_input_returns_empty_summary(settings):
    groups, statuses = summarize(make_agent(settings), [])
    assert groups == []
    assert statuses == []


def test_only_non_work_tasks(settings):
    groups, statuses = summarize(make_agent(settings), sample_tasks()[6:8])
    assert groups == []
    assert statuses[-1] == 'summary complete (100%)'


def test_lower_threshold_override_removes_more(settings):
    embedder = FakeEmbedder()
    agent = make_agent(settings, embedder=embedder)
    tasks = [make_task('1', 'Sprint 10', 'a task'), make_task('2', 'Sprint 10', 'b task')]

    groups, _ = summarize(agent, tasks, similarity_threshold=-1.0)
    assert groups == [{'title': 'Sprint 10', 'tasks': ['a task']}]


def test_classifier_strategy(settings):
    settings.summarization.grouping_strategy = 'classifier'
    classifier = FakeTitleClassifier({'Daily standup': 'meetings', 'Projects': 'project_tasks'})
    agent = make_agent(settings, title_classifier=classifier)
    tasks = [
        make_task('1', 'Daily standup', 'sync with team'),
        make_task('2', 'Projects', 'roadmap review'),
        make_task('3', 'Checkout', 'implement page'),
    ]

    groups, _ = summarize(agent, tasks)
    assert [group['title'] for group in groups] == ['Checkout', 'Project Tasks', 'Meetings']
    assert classifier.load_calls == 1


def test_model_failure_falls_back_to_exact_titles(settings):
    agent = make_agent(settings, embedder=FakeEmbedder(fail=True))
    groups, statuses = summarize(agent, sample_tasks())

    assert groups == [
        {'title': 'Sprint 10', 'tasks': [
            'fix login bug',
            'review pull request for payments',
            'write release notes',
            'and changelog',
            'fix the login bug',
            'check API links',
            'deploy staging build',
        ]},
        {'title': 'Sprint 11', 'tasks': ['implement checkout page']},
        {'title': 'General Tasks', 'tasks': ['update onboarding docs']},
    ]
    assert statuses[-1] == 'summary complete (100%)'
    assert agent.get_agent_status()['metrics']['fallback_runs'] == 1


def test_total_failure_reports_error_and_returns_nothing(settings):
    agent = make_agent(settings)
    broken = [make_task('1', 42, 'not a string title')]

    groups, statuses = summarize(agent, broken)
    assert groups == []
    assert statuses[-1] == ERROR_STATUS
    assert agent.get_agent_status()['metrics']['failed_runs'] == 1


def test_debounced_progress_still_delivers_the_final_status(settings):
    settings.progress.debounce_ms = 60_000
    groups, statuses = summarize(make_agent(settings), sample_tasks())
    assert statuses[0] == 'initializing (0%)'
    assert statuses[-1] == 'summary complete (100%)'
    assert len(statuses) == 2


def test_agent_status_tracks_runs(settings):
    agent = make_agent(settings)
    asyncio.run(agent.summarize(sample_tasks()))
    asyncio.run(agent.summarize(sample_tasks()))

    status = agent.get_agent_status()
    assert status['metrics']['total_runs'] == 2
    assert status['metrics']['successful_runs'] == 2
    assert status['grouping_strategy'] == 'similarity'


def test_missing_services_are_built_over_the_injected_embedder(settings):
    settings.summarization.grouping_strategy = 'classifier'
    embedder = FakeEmbedder()
    agent = TaskSummaryAgent(settings, embedder=embedder)

    assert isinstance(agent.sentence_validator, SentenceValidityService)
    assert isinstance(agent.title_classifier, TitleClassificationService)
    assert agent.sentence_validator.embedding_service is embedder
    assert agent.title_classifier.embedding_service is embedder


def test_unused_services_are_not_kept(settings):
    settings.summarization.validate_segments = False
    agent = TaskSummaryAgent(settings, embedder=FakeEmbedder(), title_classifier=FakeTitleClassifier())

    assert agent.sentence_validator is None
    assert agent.title_classifier is None
