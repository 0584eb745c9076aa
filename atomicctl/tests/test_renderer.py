import pytest

from atomicctl.modules.provision import AuthOptions, EngineOptions, RenderError, render_engine_config
from atomicctl.modules.provision.renderer import quote

AUTH = AuthOptions(
    ca_cert_remote_path='/etc/docker/ca.pem',
    server_cert_remote_path='/etc/docker/server.pem',
    server_key_remote_path='/etc/docker/server-key.pem',
)

EXPECTED = """[Unit]
Description=Docker Application Container Engine
Documentation=http://docs.docker.com
After=network.target

[Service]
ExecStart=/usr/bin/docker -d -H tcp://0.0.0.0:2376 -H unix:///var/run/docker.sock --storage-driver overlay --tlsverify --tlscacert /etc/docker/ca.pem --tlscert /etc/docker/server.pem --tlskey /etc/docker/server-key.pem --label env=dev --label provider=virtualbox --insecure-registry registry.local:5000 --registry-mirror https://mirror.local --debug 
MountFlags=slave
LimitNOFILE=1048576
LimitNPROC=1048576
LimitCORE=infinity
Environment="HTTP_PROXY=http://proxy:3128" "NO_PROXY=localhost" 

[Install]
WantedBy=multi-user.target
"""


def make_engine(**kwargs):
    defaults = dict(
        storage_driver='overlay',
        labels=['env=dev', 'provider=virtualbox'],
        insecure_registry=['registry.local:5000'],
        registry_mirror=['https://mirror.local'],
        arbitrary_flags=['debug'],
        env=['HTTP_PROXY=http://proxy:3128', 'NO_PROXY=localhost'],
    )
    defaults.update(kwargs)
    return EngineOptions(**defaults)


def test_render_full_unit():
    assert render_engine_config(make_engine(), AUTH, 2376) == EXPECTED


def test_render_is_deterministic():
    engine = make_engine()
    assert render_engine_config(engine, AUTH, 2376) == render_engine_config(engine, AUTH, 2376)


def test_render_does_not_mutate_inputs():
    engine = make_engine()
    before = engine.copy()
    render_engine_config(engine, AUTH, 2376)
    assert engine == before


def test_flag_counts_and_order():
    engine = make_engine(
        labels=['a=1', 'b=2', 'c=3'],
        insecure_registry=['r1', 'r2'],
        registry_mirror=[],
        arbitrary_flags=['ipv6', 'debug', 'log-level=warn'],
    )
    exec_start = next(
        line for line in render_engine_config(engine, AUTH, 2376).splitlines()
        if line.startswith('ExecStart=')
    )
    tokens = exec_start.split()

    labels = [tokens[i + 1] for i, t in enumerate(tokens) if t == '--label']
    registries = [tokens[i + 1] for i, t in enumerate(tokens) if t == '--insecure-registry']
    assert labels == ['a=1', 'b=2', 'c=3']
    assert registries == ['r1', 'r2']
    assert '--registry-mirror' not in tokens
    assert tokens[-3:] == ['--ipv6', '--debug', '--log-level=warn']


def test_render_empty_lists():
    engine = EngineOptions(storage_driver='overlay')
    rendered = render_engine_config(engine, AUTH, 2377)
    assert '-H tcp://0.0.0.0:2377 ' in rendered
    assert '--label' not in rendered
    assert 'Environment=\n' in rendered


def test_missing_template_raises_render_error():
    with pytest.raises(RenderError):
        render_engine_config(make_engine(), AUTH, 2376, template_name='missing.j2')


def test_undefined_variable_raises_render_error():
    with pytest.raises(RenderError):
        render_engine_config(make_engine(), None, 2376)


@pytest.mark.parametrize("value,expected", [
    ('FOO=bar', '"FOO=bar"'),
    ('MSG=say "hi"', '"MSG=say \\"hi\\""'),
    ('PATH=C:\\bin', '"PATH=C:\\\\bin"'),
    ('A=line\nbreak', '"A=line\\nbreak"'),
    ('B=\x01', '"B=\\x01"'),
])
def test_quote(value, expected):
    assert quote(value) == expected
