from __future__ import annotations

import os

from dotenv import load_dotenv

from core.config import EditorSettings, setup_logging
from core.events import BackgroundClick, HandleActivated, PaletteDrop, PointerDown, PointerMove, PointerUp
from core.session import EditorSession
from loaders.flow_loader import save_flow


def main() -> None:
    print("=" * 60)
    print("Flow editor demo")
    print("=" * 60)

    load_dotenv()
    settings = EditorSettings.from_env()
    setup_logging(settings.log_level)
    base_dir = os.path.dirname(os.path.abspath(__file__))
    output_json = os.path.join(base_dir, 'chatbot-flow.json')

    session = EditorSession(settings)
    media = settings.drag_media_type

    # Drop a message and an end node from the palette
    session.dispatch(PaletteDrop(payload={media: "message"}, client_x=400, client_y=140))
    message_id = session.controller.selected_id
    session.dispatch(PaletteDrop(payload={media: "end"}, client_x=700, client_y=140))
    end_id = session.controller.selected_id
    session.dispatch(BackgroundClick())

    # Drag the message node a little lower
    node = session.graph.get_node(message_id)
    session.dispatch(PointerDown(node_id=message_id, x=node.position.x + 10, y=node.position.y + 10))
    session.dispatch(PointerMove(x=node.position.x + 10, y=node.position.y + 70))
    session.dispatch(PointerUp())

    # Wire start -> message -> end with handle clicks
    for source, target in (("start-1", message_id), (message_id, end_id)):
        session.dispatch(HandleActivated(node_id=source))
        session.dispatch(HandleActivated(node_id=target))

    result = session.validate()
    print(f"\n검증 결과: {'✅' if result.ok else '❌'} {result.message}")

    for conn_id, path in session.connection_paths().items():
        print(f"  {conn_id}: {path.to_svg()}")

    save_flow(session.export_document(), output_json)
    print(f"\n✅ Flow 저장 완료: {output_json}")


if __name__ == "__main__":
    main()
