import sys
from pathlib import Path

import pytest

# Add the repository root to sys.path so we can import qti_render
REPO_ROOT = Path(__file__).resolve().parent.parent
if REPO_ROOT.as_posix() not in sys.path:
    sys.path.insert(0, REPO_ROOT.as_posix())

QTI_NS = "http://www.imsglobal.org/xsd/imsqti_v3p0"


def make_item(body: str, identifier: str = "item-1", title: str | None = "Item 1", extra: str = "") -> str:
    """Wrap item-body content in a namespaced assessment item document."""
    title_attr = f' title="{title}"' if title is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<qti-assessment-item xmlns="{QTI_NS}" identifier="{identifier}"{title_attr}>\n'
        f"  <qti-item-body>{body}</qti-item-body>\n"
        f"{extra}"
        "</qti-assessment-item>"
    )


# Common test fixtures
@pytest.fixture
def choice_item_xml():
    """Return an item with a choice interaction, one blank and a scorer rubric."""
    return make_item(
        """
    <qti-p>Prompt</qti-p>
    <qti-choice-interaction response-identifier="RESPONSE" max-choices="1">
      <qti-simple-choice identifier="A">Alpha</qti-simple-choice>
      <qti-simple-choice identifier="B">Beta</qti-simple-choice>
    </qti-choice-interaction>
    <qti-p><qti-text-entry-interaction response-identifier="RESPONSE"/></qti-p>
    <qti-rubric-block view="scorer"><qti-p>[2] Good</qti-p></qti-rubric-block>
  """
    )


@pytest.fixture
def css_report_item_xml():
    """Return an item with an embedded CSS code block and a blank."""
    return make_item(
        """
    <qti-p>
      <pre><code class="language-css">.modal { opacity: 0.5; }</code></pre>
    </qti-p>
    <qti-p><qti-text-entry-interaction response-identifier="RESPONSE"/></qti-p>
    <qti-rubric-block view="scorer"><qti-p>[1] ok</qti-p></qti-rubric-block>
  """,
        identifier="item-7",
        title="Item 7",
    )


@pytest.fixture
def blank_prompt_html():
    """Return scoring prompt HTML holding a single blank."""
    return (
        '<p>A<input class="qti-blank-input" data-blank="1" type="text" size="6" '
        'disabled aria-label="blank 1" />B</p>'
    )
