import pytest
from lsprotocol.types import (
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
    TextDocumentContentChangeWholeDocument,
    TextDocumentIdentifier,
    TextDocumentItem,
    VersionedTextDocumentIdentifier,
)

from cypherls.lsp.text_sync_manager import TextSyncManager


@pytest.fixture
def server():
    """Create a mock server for testing."""
    from unittest.mock import Mock

    server = Mock()
    server.window_log_message = Mock()
    return server


@pytest.fixture
def text_sync(server):
    """Create TextSyncManager instance."""
    return TextSyncManager(server)


@pytest.mark.asyncio
async def test_hook_registration(text_sync):
    """Test that hooks can be registered."""
    async def test_hook(params):
        pass

    text_sync.add_on_save_hook(test_hook)

    assert len(text_sync._on_save_hooks) == 1
    assert text_sync._on_save_hooks[0] == test_hook


@pytest.mark.asyncio
async def test_hook_execution(text_sync):
    """Test that registered hooks are called."""
    hook_called = False
    received_uri = None

    async def test_hook(params: DidSaveTextDocumentParams):
        nonlocal hook_called, received_uri
        hook_called = True
        received_uri = params.text_document.uri

    text_sync.add_on_save_hook(test_hook)

    params = DidSaveTextDocumentParams(
        text_document=TextDocumentIdentifier(
            uri='file:///test/schema.yml'
        )
    )

    await text_sync._broadcast_on_save(params)

    assert hook_called
    assert received_uri == 'file:///test/schema.yml'


@pytest.mark.asyncio
async def test_multiple_hooks_execution_order(text_sync):
    """Test that multiple hooks run in registration order."""
    execution_order = []

    async def hook1(params):
        execution_order.append(1)

    async def hook2(params):
        execution_order.append(2)

    async def hook3(params):
        execution_order.append(3)

    text_sync.add_on_save_hook(hook1)
    text_sync.add_on_save_hook(hook2)
    text_sync.add_on_save_hook(hook3)

    params = DidSaveTextDocumentParams(
        text_document=TextDocumentIdentifier(uri='file:///query.cypher')
    )

    await text_sync._broadcast_on_save(params)

    assert execution_order == [1, 2, 3]


@pytest.mark.asyncio
async def test_hook_error_isolation(text_sync, server):
    """Test that hook errors don't prevent other hooks from running."""
    hook2_called = False

    async def failing_hook(params):
        raise ValueError("Test error")

    async def successful_hook(params):
        nonlocal hook2_called
        hook2_called = True

    text_sync.add_on_save_hook(failing_hook)
    text_sync.add_on_save_hook(successful_hook)

    params = DidSaveTextDocumentParams(
        text_document=TextDocumentIdentifier(uri='file:///query.cypher')
    )

    # Should not raise exception
    await text_sync._broadcast_on_save(params)

    # Second hook should still run
    assert hook2_called

    # Error should be logged
    assert server.window_log_message.called
    call_args = server.window_log_message.call_args[0][0]
    assert isinstance(call_args, LogMessageParams)
    assert call_args.type == MessageType.Error
    assert "failing_hook" in call_args.message


@pytest.mark.asyncio
async def test_each_event_has_its_own_hooks(text_sync):
    """Test that open, change and close hooks only see their own events."""
    seen = []

    async def on_open(params):
        seen.append(("open", params.text_document.uri))

    async def on_change(params):
        seen.append(("change", params.text_document.version))

    async def on_close(params):
        seen.append(("close", params.text_document.uri))

    text_sync.add_on_open_hook(on_open)
    text_sync.add_on_change_hook(on_change)
    text_sync.add_on_close_hook(on_close)

    uri = 'file:///query.cypher'
    await text_sync._broadcast_on_open(
        DidOpenTextDocumentParams(
            text_document=TextDocumentItem(
                uri=uri, language_id='cypher', version=1, text='MATCH (n)'
            )
        )
    )
    await text_sync._broadcast_on_change(
        DidChangeTextDocumentParams(
            text_document=VersionedTextDocumentIdentifier(uri=uri, version=2),
            content_changes=[
                TextDocumentContentChangeWholeDocument(text='MATCH (n) RETURN n')
            ],
        )
    )
    await text_sync._broadcast_on_close(
        DidCloseTextDocumentParams(text_document=TextDocumentIdentifier(uri=uri))
    )

    assert seen == [("open", uri), ("change", 2), ("close", uri)]
