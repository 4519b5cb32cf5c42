"""Business services for the Unmute World API.

Submodules are imported directly (``from unmute_world.services import
post_service``); the models import ``services.stats`` at load time, so this
package does not eagerly import anything that depends on the models.
"""
