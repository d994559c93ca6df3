from django.core.management.base import BaseCommand

from stories.sitemap import write_sitemap


class Command(BaseCommand):
    help = 'Schreibt sitemap.xml mit statischen Seiten und allen Geschichten'

    def add_arguments(self, parser):
        parser.add_argument('--output', '-o', default=None, help='Zielpfad (Standard: settings.SITEMAP_OUTPUT)')

    def handle(self, *args, **options):
        path, count = write_sitemap(options['output'])
        self.stdout.write(self.style.SUCCESS(f'Sitemap geschrieben: {path} ({count} Stories)'))
