from django.http import JsonResponse


class ApiNotFoundMiddleware:
    """Answer unknown ``/api/`` routes with the JSON error envelope instead of an HTML 404."""
    PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        path = request.path or ''
        if (
            response.status_code == 404
            and path.startswith(self.PREFIX)
            and not response.get('Content-Type', '').startswith('application/json')
        ):
            return JsonResponse(
                {'success': False, 'message': f'Route {path} not found'},
                status=404,
            )
        return response
