from django.db import models, transaction


class NumberSeries(models.Model):
    """Simple, readable number series.

    The important part is *concurrency safety*:
    - We lock the NumberSeries row in the database (select_for_update)
    - We read next_number
    - We increment next_number and save
    - We return a formatted string (prefix + zero-padded number)

    Two users transferring stock at the same time never get the same
    reference number.
    """

    code = models.CharField(max_length=50, unique=True)
    prefix = models.CharField(max_length=50, blank=True, default="")
    next_number = models.IntegerField(default=1)
    min_width = models.IntegerField(default=5)

    class Meta:
        ordering = ["code"]
        verbose_name_plural = "number series"

    def __str__(self):
        return f"{self.code} ({self.prefix}…)"

    @transaction.atomic
    def allocate(self) -> str:
        """Allocate the next number without duplicates.

        The row lock is held until the surrounding transaction commits, so no
        other allocation can read the old next_number in parallel.
        """
        series = type(self).objects.select_for_update().get(pk=self.pk)

        current = series.next_number
        series.next_number = current + 1
        series.save(update_fields=["next_number"])

        return f"{series.prefix}{str(current).zfill(series.min_width)}"

    @classmethod
    @transaction.atomic
    def next_for(cls, code: str, prefix: str = "", min_width: int = 5) -> str:
        """Get-or-create the series `code` and allocate from it."""
        series, _ = cls.objects.get_or_create(
            code=code,
            defaults={"prefix": prefix, "min_width": min_width},
        )
        return series.allocate()
