from django.contrib.auth.base_user import BaseUserManager


class MemberManager(BaseUserManager):
    """
    Manager for members keyed by username
    """

    def create_member(self, username, password_hash=None, **extra_fields):
        """
        Create and save a member whose password was already hashed by the caller.
        """
        if not username:
            raise ValueError('The Username field must be set')

        member = self.model(username=username, **extra_fields)
        if password_hash:
            member.password = password_hash
        else:
            member.set_unusable_password()
        member.save(using=self._db)
        return member

    def create_user(self, username, password=None, **extra_fields):
        """
        Create and save a member with the given username and raw password.
        """
        if not username:
            raise ValueError('The Username field must be set')

        member = self.model(username=username, **extra_fields)
        member.set_password(password)
        member.save(using=self._db)
        return member

    def create_superuser(self, username, password=None, **extra_fields):
        """
        Create and save a superuser with the given username and password.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(username, password, **extra_fields)
