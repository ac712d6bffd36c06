from __future__ import annotations

import pytest

from selfheal.core.healer import SelfHealingResolver
from selfheal.core.repository import ElementRepository
from tests.helpers import managed_document

LOGIN_PAGE = """
<html><body>
  <form class="login">
    <label>Email <input id="email" name="email" type="email"></label>
    <div class="container">
      <button id="login-btn" class="btn primary" type="submit">Sign In</button>
      <button type="button">Cancel</button>
      <button type="button">Help</button>
    </div>
    <section data-id="user-profile-card-123" class="card">Profile</section>
  </form>
</body></html>
"""


@pytest.mark.integration
@pytest.mark.asyncio
async def test_renamed_button_heals_by_role(suite_config):
    with managed_document(suite_config, LOGIN_PAGE) as document:
        repository = ElementRepository(suite_config.healing)
        await repository.capture("#login-btn", document)
        assert repository.get_alternative("#login-btn") == "#login-btn"
        assert repository.get_bundle("#login-btn").nearby_text == "Sign In"

        await document.evaluate("document.getElementById('login-btn').id = 'signin-btn';")
        healed = await SelfHealingResolver(repository).heal("#login-btn", document)

        assert healed == 'role=button[name="Sign In"]'
        assert len(await document.query_all(healed)) == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_reshuffled_and_renamed_locators_heal_without_capture(suite_config):
    with managed_document(suite_config, LOGIN_PAGE) as document:
        await document.evaluate(
            """
            const button = document.querySelector('.container > .btn');
            const wrapper = document.createElement('span');
            button.parentElement.insertBefore(wrapper, button);
            wrapper.appendChild(button);
            button.className = 'btn submit';
            document.querySelector('[data-id]').setAttribute('data-id', 'user-profile-card-456');
            """
        )
        resolver = SelfHealingResolver(ElementRepository(suite_config.healing))

        assert await resolver.heal("div.container > button.submit", document) == "button.submit"
        assert await resolver.heal('[data-id="user-profile-card-123"]', document) == '[data-id*="user-profi"]'
        assert await resolver.heal("#nothing-like-this", document) is None
