from django.contrib.auth.backends import ModelBackend
from django.contrib.auth.models import User


class EmailAuthBackend(ModelBackend):
    """
    Authenticate with the e-mail address in place of the username
    """
    def authenticate(self, request, username=None, password=None, **kwargs):
        email = kwargs.get('email', username)
        if email is None or password is None:
            return None

        user = User.objects.filter(email__iexact=email).order_by('id').first()
        if user is None:
            # Run the default password hasher once to reduce the timing difference
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
