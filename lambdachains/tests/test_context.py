"""
Tests for InvocationContext, ContextDecorator and the log serializers.
"""

import copy
import json
import logging

import structlog

from lambdachains import ContextDecorator, InvocationContext, LoggingSettings, derive_child
from lambdachains.context import log_safe_fields, serialize_context, serialize_error

TEST_CONTEXT = {
    'function_name': 'testFunction',
    'aws_request_id': '00112233445566778899',
    'function_version': '$LATEST',
}


class FakeLambdaContext:
    """Stand-in for the context object of the python Lambda runtime."""

    function_name = 'objectFunction'
    function_version = '7'

    def __init__(self):
        self.aws_request_id = 'req-1'
        self.memory_limit_in_mb = 128

    def get_remaining_time_in_millis(self):
        return 1000


def decorate(context=TEST_CONTEXT, level='info'):
    decorator = ContextDecorator(LoggingSettings(level=level), logger_factory=structlog.ReturnLoggerFactory())
    return decorator(context)


def test_adds_log():
    assert 'log' not in TEST_CONTEXT

    context = decorate()

    assert isinstance(context, InvocationContext)
    assert context.log is not None
    assert 'log' not in TEST_CONTEXT
    assert 'child' not in TEST_CONTEXT


def test_default_fields_bound():
    fields = structlog.get_context(decorate().log)

    assert fields['name'] == TEST_CONTEXT['function_name']
    assert fields['aws_request_id'] == TEST_CONTEXT['aws_request_id']
    assert fields['function_version'] == TEST_CONTEXT['function_version']


def test_original_fields_kept():
    context = decorate(dict(TEST_CONTEXT, custom={'nested': [1, 2]}))

    assert context['function_name'] == 'testFunction'
    assert context.get('custom') == {'nested': [1, 2]}
    assert context.has('aws_request_id')
    assert context.get('missing', 'default') == 'default'


def test_fields_are_copied():
    source = dict(TEST_CONTEXT, custom={'nested': [1, 2]})
    context = decorate(source)
    context.fields['custom']['nested'].append(3)

    assert source['custom'] == {'nested': [1, 2]}


def test_platform_context_object():
    raw = FakeLambdaContext()
    context = decorate(raw)

    assert context.function_name == 'objectFunction'
    assert context.aws_request_id == 'req-1'
    assert context.get('memory_limit_in_mb') == 128
    assert context.get_remaining_time_in_millis() == 1000
    assert structlog.get_context(context.log)['function_version'] == '7'


def test_missing_context():
    context = decorate(None)

    assert context.fields == {}
    assert structlog.get_context(context.log)['name'] is None


def test_child_context():
    context = decorate()
    before = copy.deepcopy(context.fields)
    before_log = dict(structlog.get_context(context.log))

    child = context.child(test_field='testField')

    assert child is not context
    assert structlog.get_context(child.log)['test_field'] == 'testField'
    assert 'test_field' not in structlog.get_context(context.log)
    assert context.fields == before
    assert dict(structlog.get_context(context.log)) == before_log
    assert child.fields == context.fields
    assert child.fields is not context.fields


def test_derive_child_is_a_free_function():
    context = decorate()
    child = derive_child(context, {'step': 'auth'})
    grandchild = derive_child(child, {'attempt': 2})

    fields = structlog.get_context(grandchild.log)
    assert fields['step'] == 'auth'
    assert fields['attempt'] == 2
    assert 'attempt' not in structlog.get_context(child.log)


def test_child_with_context_field_omits_capabilities():
    context = decorate()
    child = context.child(context=context)

    logged = structlog.get_context(child.log)['context']
    assert logged == TEST_CONTEXT
    assert 'log' not in logged
    assert 'child' not in logged


def test_log_output_is_json():
    context = decorate()
    line = context.log.info('received', items=3)

    record = json.loads(line)
    assert record['event'] == 'received'
    assert record['items'] == 3
    assert record['level'] == 'info'
    assert record['aws_request_id'] == TEST_CONTEXT['aws_request_id']
    assert 'timestamp' in record


def test_logged_errors_are_serialized():
    context = decorate()
    error = ValueError('Winter is coming!')
    error.details = {'temperature': -1}

    record = json.loads(context.log.error('failed', err=error))

    assert record['err']['message'] == 'Winter is coming!'
    assert record['err']['name'] == 'ValueError'
    assert 'stack' in record['err']
    assert record['err']['details'] == {'temperature': -1}


def test_logged_exc_info_is_rendered():
    context = decorate()

    record = json.loads(context.log.error('failed', exc_info=ValueError('kaboom')))

    assert 'ValueError: kaboom' in record['exception']


def test_keys_and_items():
    context = decorate()

    assert set(context.keys()) == set(TEST_CONTEXT)
    assert dict(context.items()) == TEST_CONTEXT


def test_level_filtering():
    context = decorate(level='warn')

    assert context.log.info('hidden') is None
    assert context.log.warning('shown') is not None


class TestSerializers:
    def test_context_serializer_omits_capabilities(self):
        initial = {'log': 'log', 'child': 'child', 'meaning_of_life': 42}
        assert serialize_context(initial) == {'meaning_of_life': 42}

    def test_context_serializer_accepts_invocation_context(self):
        assert serialize_context(decorate()) == TEST_CONTEXT

    def test_error_serializer_ignores_non_objects(self):
        assert serialize_error('error') == 'error'

    def test_error_serializer_keeps_plain_objects(self):
        error = {'message': 'Winter is coming!', 'details': {'temperature': -1}}
        assert serialize_error(error) == error

    def test_error_serializer_without_additional_fields(self):
        serialized = serialize_error(ValueError('Winter is coming!'))
        assert serialized['message'] == 'Winter is coming!'
        assert serialized['name'] == 'ValueError'
        assert 'stack' in serialized

    def test_error_serializer_with_additional_fields(self):
        error = ValueError('Winter is coming!')
        error.details = {'temperature': -1}

        serialized = serialize_error(error)
        assert serialized['message'] == 'Winter is coming!'
        assert serialized['details'] == {'temperature': -1}

    def test_processor(self):
        event_dict = log_safe_fields(None, 'info', {'event': 'x', 'error': KeyError('k'), 'context': {'log': 1}})
        assert event_dict['error']['name'] == 'KeyError'
        assert event_dict['context'] == {}


class TestLoggingSettings:
    def test_defaults(self):
        assert LoggingSettings().level == 'INFO'
        assert LoggingSettings().levelno == logging.INFO

    def test_from_env(self):
        assert LoggingSettings.from_env({'LOG_LEVEL': 'debug'}).levelno == logging.DEBUG
        assert LoggingSettings.from_env({}).level == 'INFO'

    def test_bunyan_level_names(self):
        assert LoggingSettings(level='warn').levelno == logging.WARNING
        assert LoggingSettings(level='fatal').levelno == logging.CRITICAL
        assert LoggingSettings(level='trace').levelno == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        assert LoggingSettings(level='chatty').levelno == logging.INFO

    def test_decorator_reads_environment_once(self, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'error')
        decorator = ContextDecorator(logger_factory=structlog.ReturnLoggerFactory())
        monkeypatch.setenv('LOG_LEVEL', 'debug')

        assert decorator.settings.level == 'ERROR'
        assert decorator(TEST_CONTEXT).log.warning('hidden') is None
