# core/middleware.py

"""
Writes the activity trail once the view has answered.

DRF authenticates inside the view and copies the user back onto the
Django request, so request.user here is the JWT user.
"""

from django.utils.deprecation import MiddlewareMixin

from core.services.activity import entity_ref_for, log_activity, route_activity


class ActivityLogMiddleware(MiddlewareMixin):
    def process_response(self, request, response):
        if not 200 <= response.status_code < 400:
            return response

        match = getattr(request, "resolver_match", None)
        if match is None:
            return response

        activity = route_activity(match.url_name, request.method)
        if activity is None:
            return response

        action, module = activity
        log_activity(
            user=getattr(request, "user", None),
            action=action,
            module=module,
            entity_ref=entity_ref_for(match.kwargs, getattr(response, "data", None)),
            details=f"{request.method} {request.path}",
        )
        return response
