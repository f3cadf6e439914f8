from crane.UTILS.string_interpolation import EnvironmentInterpolator

CONTEXT = {'HOST': 'db.local', 'PORT': '5432', 'EMPTY': ''}

def test_expand_braced_and_bare():
    assert EnvironmentInterpolator.expand('${HOST}:$PORT', CONTEXT) == 'db.local:5432'

def test_unset_is_empty():
    assert EnvironmentInterpolator.expand('a${MISSING}b$MISSING', CONTEXT) == 'ab'

def test_default_and_alternative():
    assert EnvironmentInterpolator.expand('${MISSING:-fallback}', CONTEXT) == 'fallback'
    assert EnvironmentInterpolator.expand('${EMPTY:-fallback}', CONTEXT) == 'fallback'
    assert EnvironmentInterpolator.expand('${HOST:-fallback}', CONTEXT) == 'db.local'
    assert EnvironmentInterpolator.expand('${HOST:+set}', CONTEXT) == 'set'
    assert EnvironmentInterpolator.expand('${MISSING:+set}', CONTEXT) == ''

def test_literal_dollar_kept():
    assert EnvironmentInterpolator.expand('cost: 5$', CONTEXT) == 'cost: 5$'

def test_defaults_to_process_environment(monkeypatch):
    monkeypatch.setenv('CRANE_TEST_VALUE', 'from-env')
    assert EnvironmentInterpolator.expand('$CRANE_TEST_VALUE') == 'from-env'

def test_expand_all():
    assert EnvironmentInterpolator.expand_all(['$HOST', 'x'], CONTEXT) == ['db.local', 'x']
