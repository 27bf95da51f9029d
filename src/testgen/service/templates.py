"""Built-in test templates, seeded into the store at startup.

Placeholders use ``{{NAME}}``; the LLM fills them in when a template is passed
as a style hint.
"""

from testgen.entities import TestTemplate
from testgen.observability.logging import get_logger
from testgen.storage.base import Store

logger = get_logger(__name__)

_JEST_REACT = """import { render, screen, fireEvent } from '@testing-library/react';
import '@testing-library/jest-dom';
import {{COMPONENT_NAME}} from './{{COMPONENT_PATH}}';

describe('{{COMPONENT_NAME}}', () => {
  test('renders', () => {
    render(<{{COMPONENT_NAME}} />);
    expect(screen.getByText(/{{EXPECTED_TEXT}}/i)).toBeInTheDocument();
  });

  test('reacts to a click', () => {
    render(<{{COMPONENT_NAME}} />);
    fireEvent.click(screen.getByRole('button'));
    expect(screen.getByText(/{{CLICKED_TEXT}}/i)).toBeInTheDocument();
  });
});
"""

_CYPRESS = """describe('{{TEST_SUITE_NAME}}', () => {
  beforeEach(() => {
    cy.visit('{{BASE_URL}}');
  });

  it('{{TEST_DESCRIPTION}}', () => {
    cy.get('[data-testid="{{ELEMENT_ID}}"]').should('be.visible').click();
    cy.url().should('include', '{{EXPECTED_URL}}');
  });

  it('submits the form', () => {
    cy.get('[data-testid="{{INPUT_ID}}"]').type('{{TEST_INPUT}}');
    cy.get('[data-testid="{{SUBMIT_ID}}"]').click();
    cy.contains('{{EXPECTED_MESSAGE}}');
  });
});
"""

_SELENIUM = """const assert = require('assert');
const { Builder, By, until } = require('selenium-webdriver');

describe('{{TEST_SUITE_NAME}}', function () {
  let driver;

  before(async function () {
    driver = await new Builder().forBrowser('chrome').build();
  });

  after(async function () {
    await driver.quit();
  });

  it('{{TEST_DESCRIPTION}}', async function () {
    await driver.get('{{BASE_URL}}');
    const element = await driver.wait(until.elementLocated(By.css('[data-testid="{{ELEMENT_ID}}"]')), 10000);
    await element.click();
    const result = await driver.findElement(By.css('[data-testid="{{RESULT_ID}}"]'));
    assert.strictEqual(await result.getText(), '{{EXPECTED_TEXT}}');
  });
});
"""

_PLAYWRIGHT = """const { test, expect } = require('@playwright/test');

test.describe('{{TEST_SUITE_NAME}}', () => {
  test('{{TEST_DESCRIPTION}}', async ({ page }) => {
    await page.goto('{{BASE_URL}}');
    await page.getByTestId('{{BUTTON_ID}}').click();
    await expect(page.getByTestId('{{RESULT_ID}}')).toHaveText('{{EXPECTED_TEXT}}');
  });

  test('renders on a small screen', async ({ page }) => {
    await page.setViewportSize({ width: 375, height: 667 });
    await page.goto('{{BASE_URL}}');
    await expect(page.getByTestId('{{MOBILE_MENU_ID}}')).toBeVisible();
  });
});
"""

_PYTEST = '''import pytest

from {{MODULE_NAME}} import {{FUNCTION_NAME}}


class Test{{CLASS_NAME}}:
    def test_returns_expected_result(self):
        assert {{FUNCTION_NAME}}({{TEST_INPUT}}) == {{EXPECTED_OUTPUT}}

    def test_rejects_invalid_input(self):
        with pytest.raises({{EXPECTED_EXCEPTION}}):
            {{FUNCTION_NAME}}({{INVALID_INPUT}})

    @pytest.mark.parametrize(
        "value,expected",
        [
            ({{CASE_1_INPUT}}, {{CASE_1_EXPECTED}}),
            ({{CASE_2_INPUT}}, {{CASE_2_EXPECTED}}),
        ],
    )
    def test_parametrized(self, value, expected):
        assert {{FUNCTION_NAME}}(value) == expected
'''

_JUNIT = """package {{PACKAGE_NAME}};

import static org.junit.jupiter.api.Assertions.assertEquals;
import static org.junit.jupiter.api.Assertions.assertThrows;

import org.junit.jupiter.api.BeforeEach;
import org.junit.jupiter.api.Test;

class {{CLASS_NAME}}Test {
    private {{CLASS_NAME}} subject;

    @BeforeEach
    void setUp() {
        subject = new {{CLASS_NAME}}();
    }

    @Test
    void returnsExpectedResult() {
        assertEquals({{EXPECTED_OUTPUT}}, subject.{{METHOD_NAME}}({{TEST_INPUT}}));
    }

    @Test
    void rejectsInvalidInput() {
        assertThrows({{EXPECTED_EXCEPTION}}.class, () -> subject.{{METHOD_NAME}}({{INVALID_INPUT}}));
    }
}
"""

DEFAULT_TEMPLATES: tuple[dict[str, str], ...] = (
    {
        "framework": "Jest (React)",
        "category": "unit",
        "template": _JEST_REACT,
        "description": "React component tests with Jest and React Testing Library",
    },
    {"framework": "Cypress", "category": "e2e", "template": _CYPRESS, "description": "End-to-end tests with Cypress"},
    {
        "framework": "Selenium",
        "category": "e2e",
        "template": _SELENIUM,
        "description": "Browser automation with Selenium WebDriver and Mocha",
    },
    {
        "framework": "Playwright",
        "category": "e2e",
        "template": _PLAYWRIGHT,
        "description": "Browser tests with Playwright",
    },
    {"framework": "Pytest", "category": "unit", "template": _PYTEST, "description": "Python unit tests with pytest"},
    {"framework": "JUnit", "category": "unit", "template": _JUNIT, "description": "Java unit tests with JUnit 5"},
)


async def seed_default_templates(store: Store) -> list[TestTemplate]:
    """Add the built-in templates whose (framework, category) is not stored yet."""
    seeded = []
    for entry in DEFAULT_TEMPLATES:
        if await store.list_templates(framework=entry["framework"], category=entry["category"]):
            continue
        seeded.append(await store.add_template(TestTemplate(**entry)))

    logger.info("templates_seeded", count=len(seeded))
    return seeded
