from django.contrib.auth import get_user_model  # type: ignore
from django.core.management.base import BaseCommand, CommandError  # type: ignore

User = get_user_model()


class Command(BaseCommand):
    help = 'Crea (o promueve) la cuenta de super administrador'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True)
        parser.add_argument('--password', required=True)
        parser.add_argument('--name', default='Super Admin')

    def handle(self, *args, **options):
        email = User.objects.normalize_email(options['email'])
        password = options['password']
        if len(password) < 6:
            raise CommandError('La contraseña debe tener al menos 6 caracteres.')

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            User.objects.create_superuser(email=email, password=password, name=options['name'])
            self.stdout.write(self.style.SUCCESS(f'Super administrador creado: {email}'))
            return

        user.user_type = User.UserType.SUPER_ADMIN
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.set_password(password)
        user.save()
        self.stdout.write(self.style.WARNING(f'Usuario existente promovido a super administrador: {email}'))
